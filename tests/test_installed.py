import unittest

from modplan.models import FileInfo, InstalledModRecord, ModProject, ModVersion
from modplan.services.installed import (
    InstalledIndex,
    find_installed_project,
    find_installed_version,
)


class TestFindInstalledProject(unittest.TestCase):
    def setUp(self):
        self.sodium = ModProject(id="AANobbMI", slug="sodium", title="Sodium")

    def test_fuzzy_filename_match(self):
        record = InstalledModRecord(filename="sodium-fabric-0.5.jar")
        self.assertIs(find_installed_project([record], self.sodium), record)

    def test_id_match_wins(self):
        fuzzy = InstalledModRecord(filename="sodium-extra-0.5.jar")
        exact = InstalledModRecord(filename="renamed.jar", project_id="AANobbMI")
        self.assertIs(find_installed_project([fuzzy, exact], self.sodium), exact)

    def test_title_normalized(self):
        project = ModProject(id="x", slug="fabric-api", title="Fabric API")
        record = InstalledModRecord(filename="fabric_api-0.92.0+1.20.1.jar")
        self.assertIs(find_installed_project([record], project), record)

    def test_no_match(self):
        record = InstalledModRecord(filename="lithium-0.11.jar", project_id="gvQqBUqZ")
        self.assertIsNone(find_installed_project([record], self.sodium))
        self.assertIsNone(find_installed_project([], self.sodium))
        self.assertIsNone(find_installed_project([record], None))

    def test_plain_matching(self):
        project = ModProject(id="", slug="fabric-api", title="Fabric API")
        squashed = InstalledModRecord(filename="fabricapi-0.92.jar")
        self.assertIsNone(find_installed_project([squashed], project, normalized=False))
        named = InstalledModRecord(filename="x.jar", name="Fabric API")
        self.assertIs(find_installed_project([named], project, normalized=False), named)

    def test_index_callback(self):
        index = InstalledIndex([InstalledModRecord(filename="Sodium-0.5.3.jar")])
        self.assertIsNotNone(index.is_installed(self.sodium))
        self.assertIsNone(InstalledIndex().is_installed(self.sodium))


class TestFindInstalledVersion(unittest.TestCase):
    def setUp(self):
        self.versions = [
            ModVersion(
                id="v1",
                project_id="p",
                name="",
                version_number="0.5.3",
                files=[FileInfo(url="u", filename="sodium-0.5.3.jar", primary=True)],
            ),
            ModVersion(id="v2", project_id="p", name="", version_number="0.5.8"),
        ]

    def test_by_version_id(self):
        record = InstalledModRecord(filename="x.jar", version_id="v2")
        self.assertEqual(find_installed_version(self.versions, record).id, "v2")

    def test_by_version_number(self):
        record = InstalledModRecord(filename="x.jar", version="0.5.8")
        self.assertEqual(find_installed_version(self.versions, record).id, "v2")

    def test_by_disabled_filename(self):
        record = InstalledModRecord(filename="sodium-0.5.3.jar.disabled", enabled=False)
        self.assertEqual(find_installed_version(self.versions, record).id, "v1")

    def test_missing(self):
        self.assertIsNone(find_installed_version(self.versions, None))
        record = InstalledModRecord(filename="other.jar")
        self.assertIsNone(find_installed_version(self.versions, record))


if __name__ == "__main__":
    unittest.main()
