import unittest

from modplan.models import (
    DependencyInfo,
    FileInfo,
    InstalledModRecord,
    ModProject,
    ModVersion,
    ProjectType,
)
from modplan.services.mod_resolver import ModResolver


def version(idx, project_id, game_versions, loaders=("fabric",), deps=()):
    return ModVersion(
        id=idx,
        project_id=project_id,
        name=idx,
        version_number=idx,
        game_versions=list(game_versions),
        loaders=list(loaders),
        dependencies=[DependencyInfo(project_id=d) for d in deps],
        files=[FileInfo(url=f"https://cdn/{idx}.jar", filename=f"{idx}.jar", primary=True)],
    )


class FakeClient:
    """按项目保存版本，game_version 过滤模拟目录的精确匹配"""

    def __init__(self, projects, versions):
        self.projects = projects
        self.versions = versions
        self.version_requests = []

    async def get_project(self, idx):
        for project in self.projects:
            if idx in project.identifiers:
                return project
        return None

    async def get_versions(self, idx, mc_version=None, mod_loader=None):
        self.version_requests.append((idx, mc_version, mod_loader))
        found = self.versions.get(idx, [])
        if mc_version:
            found = [v for v in found if mc_version in v.game_versions]
        return found


class TestModResolver(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.projects = [
            ModProject(id="SODIUM", slug="sodium", title="Sodium"),
            ModProject(id="FAPI", slug="fabric-api", title="Fabric API"),
            ModProject(id="PACK", slug="faithful", title="Faithful", project_type=ProjectType.RESOURCE_PACK),
        ]
        self.versions = {
            "SODIUM": [version("sodium-0.5", "SODIUM", ["1.20.1"], deps=["FAPI"])],
            "FAPI": [version("fapi-0.92", "FAPI", ["1.20"])],
            "PACK": [version("pack-1", "PACK", ["1.20.1"], loaders=["minecraft"])],
        }
        self.client = FakeClient(self.projects, self.versions)

    async def test_resolve_with_dependencies(self):
        resolver = ModResolver(self.client)
        plan = await resolver.resolve("sodium", "1.20.1", "fabric")

        self.assertTrue(plan.found)
        self.assertEqual(plan.version.id, "sodium-0.5")
        self.assertEqual(plan.file.filename, "sodium-0.5.jar")
        self.assertFalse(plan.selection.show_fallback_notice)
        self.assertEqual([n.project.id for n in plan.dependencies.nodes], ["FAPI"])
        # Fabric API 只声明了 1.20，本地近似匹配
        self.assertEqual(plan.dependencies.nodes[0].version.id, "fapi-0.92")
        self.assertIn(("FAPI", None, "fabric"), self.client.version_requests)

    async def test_installed_dependency(self):
        installed = [InstalledModRecord(filename="fabric-api-0.92.0.jar")]
        resolver = ModResolver(self.client, installed=installed)
        plan = await resolver.resolve("SODIUM", "1.20.1", "fabric")

        node = plan.dependencies.nodes[0]
        self.assertTrue(node.already_installed)
        self.assertEqual(plan.install_order(), [])

    async def test_no_compatible_version(self):
        resolver = ModResolver(self.client)
        plan = await resolver.resolve("sodium", "1.20.1", "forge")

        self.assertFalse(plan.found)
        self.assertIsNone(plan.file)
        self.assertEqual(plan.dependencies.nodes, [])

    async def test_fallback_notice(self):
        resolver = ModResolver(self.client)
        plan = await resolver.resolve("fabric-api", "1.20.4", "fabric")
        self.assertTrue(plan.found)
        self.assertTrue(plan.selection.show_fallback_notice)

    async def test_loader_ignored_for_resource_packs(self):
        resolver = ModResolver(self.client)
        plan = await resolver.resolve("faithful", "1.20.1", "fabric")
        self.assertEqual(plan.version.id, "pack-1")
        self.assertIn(("PACK", "1.20.1", None), self.client.version_requests)

    async def test_missing_project(self):
        resolver = ModResolver(self.client)
        self.assertIsNone(await resolver.resolve("nope", "1.20.1", "fabric"))
        self.assertIsNone(await resolver.resolve("", "1.20.1", "fabric"))

    async def test_without_dependencies(self):
        resolver = ModResolver(self.client)
        plan = await resolver.resolve("sodium", "1.20.1", "fabric", with_dependencies=False)
        self.assertEqual(plan.dependencies.nodes, [])


if __name__ == "__main__":
    unittest.main()
