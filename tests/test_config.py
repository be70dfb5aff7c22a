import json
import tempfile
import unittest
from pathlib import Path

from modplan.cli import build_config, load_config
from modplan.exceptions import ConfigError, ConfigParseError, ConfigValidationError
from modplan.models import ModLoader, ProjectType, Provider, ResolveConfig


class TestResolveConfig(unittest.TestCase):
    def test_defaults(self):
        config = ResolveConfig.from_dict({})
        self.assertIsNone(config.minecraft.version)
        self.assertIsNone(config.minecraft.loader_name)
        self.assertEqual(config.minecraft.project_type, ProjectType.MOD)
        self.assertEqual(config.catalog.provider, Provider.MODRINTH)

    def test_from_dict(self):
        config = ResolveConfig.from_dict(
            {
                "minecraft": {"version": ["1.20.1", "1.19.2"], "mod_loader": "Fabric"},
                "catalog": {"timeout": 5},
            }
        )
        self.assertEqual(config.minecraft.version, "1.20.1")
        self.assertEqual(config.minecraft.mod_loader, ModLoader.FABRIC)
        self.assertEqual(config.catalog.timeout, 5.0)

    def test_invalid_values(self):
        with self.assertRaises(ConfigValidationError):
            ResolveConfig.from_dict({"minecraft": {"mod_loader": "liteloader"}})
        with self.assertRaises(ConfigValidationError):
            ResolveConfig.from_dict({"catalog": {"provider": "nexus"}})
        with self.assertRaises(ConfigValidationError):
            ResolveConfig.from_dict({"catalog": {"timeout": 0}})
        with self.assertRaises(ConfigValidationError):
            ResolveConfig.from_dict(["not", "a", "dict"])


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_toml_and_overrides(self):
        path = self.dir / "modplan.toml"
        path.write_text('[minecraft]\nversion = "1.19.2"\nmod_loader = "forge"\n', encoding="utf-8")

        config = build_config(str(path), "1.20.1", None, "modpack")
        self.assertEqual(config.minecraft.version, "1.20.1")
        self.assertEqual(config.minecraft.mod_loader, ModLoader.FORGE)
        self.assertEqual(config.minecraft.project_type, ProjectType.MODPACK)

    def test_json_and_yaml(self):
        json_path = self.dir / "modplan.json"
        json_path.write_text(json.dumps({"minecraft": {"version": "1.20.1"}}), encoding="utf-8")
        yaml_path = self.dir / "modplan.yaml"
        yaml_path.write_text("minecraft:\n  mod_loader: quilt\n", encoding="utf-8")

        self.assertEqual(load_config(str(json_path))["minecraft"]["version"], "1.20.1")
        self.assertEqual(load_config(str(yaml_path))["minecraft"]["mod_loader"], "quilt")

    def test_errors(self):
        self.assertEqual(load_config(None), {})
        with self.assertRaises(ConfigError):
            load_config(str(self.dir / "missing.toml"))

        ini = self.dir / "modplan.ini"
        ini.write_text("x", encoding="utf-8")
        with self.assertRaises(ConfigError):
            load_config(str(ini))

        broken = self.dir / "broken.json"
        broken.write_text("{", encoding="utf-8")
        with self.assertRaises(ConfigParseError):
            load_config(str(broken))


if __name__ == "__main__":
    unittest.main()
