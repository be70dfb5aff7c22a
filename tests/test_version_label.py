import unittest

from modplan.models import Provider
from modplan.services.version_label import (
    format_installed_version_label,
    strip_version_from_number,
    strip_version_from_title,
    with_version_prefix,
)

NUMBER_SAMPLES = [
    ("3.2.0+1.20.1", "1.20.1"),
    ("mc1.20.1-0.5.3", "1.20.1"),
    ("fabric-api-0.92.0+1.20.1", "1.20.1"),
    ("2.1-1.19.2-forge", "1.19.2"),
    ("1.0.0-1.19.2", ""),
    ("1.0.0-1.19-1.20", None),
    ("1.20.1", "1.20.1"),
    ("5+1.20.1", "1.20.1"),
    ("0.0", "1.20"),
    ("v2.3.4", "v1.20.4"),
]

TITLE_SAMPLES = [
    ("[1.20] Release", "1.20"),
    ("Fabric 1.20.1-3.2.0", "1.20.1"),
    ("Sodium 0.5.3 for MC 1.20.1", "1.20.1"),
    ("Minecraft Version 1.20.1", "1.20.1"),
    ("1.20.1", "1.20.1"),
    ("Create | 0.5.1.f", None),
]


class TestStripVersionFromNumber(unittest.TestCase):
    def test_trailing_game_version(self):
        self.assertEqual(strip_version_from_number("3.2.0+1.20.1", "1.20.1"), "3.2.0")
        self.assertEqual(strip_version_from_number("3.2.0", "1.20.1"), "3.2.0")
        self.assertEqual(
            strip_version_from_number("fabric-api-0.92.0+1.20.1", "1.20.1"),
            "fabric-api-0.92.0",
        )

    def test_repeated_trailing_game_version(self):
        self.assertEqual(strip_version_from_number("1.4.0-1.20.1+mc1.20.1", "1.20.1"), "1.4.0")

    def test_infix_collapses_to_separator(self):
        self.assertEqual(strip_version_from_number("2.1-1.19.2-forge", "1.19.2"), "2.1-forge")

    def test_leading_game_version_prefix(self):
        self.assertEqual(strip_version_from_number("mc1.20.1-0.5.3", "1.20.1"), "mc1.20.1-0.5.3")

    def test_bare_suffix_without_context(self):
        self.assertEqual(strip_version_from_number("1.0.0-1.19.2", None), "1.0.0")
        self.assertEqual(strip_version_from_number("1.0.0-1.19-1.20", None), "1.0.0")

    def test_keeps_release_train(self):
        self.assertEqual(strip_version_from_number("1.2.3.4.5", None), "1.2.3.4.5")
        self.assertEqual(strip_version_from_number("mod-1.0", None), "mod-1.0")

    def test_degenerate_results_fall_back(self):
        self.assertEqual(strip_version_from_number("5+1.20.1", "1.20.1"), "5+1.20.1")
        self.assertEqual(strip_version_from_number("0.0", "1.20"), "0.0")
        self.assertEqual(strip_version_from_number("+1.20.1", "1.20.1"), "1.20.1")

    def test_empty_input(self):
        self.assertIsNone(strip_version_from_number("", "1.20.1"))
        self.assertIsNone(strip_version_from_number(None, None))

    def test_idempotent(self):
        for raw, gv in NUMBER_SAMPLES:
            once = strip_version_from_number(raw, gv)
            self.assertEqual(strip_version_from_number(once, gv), once, raw)


class TestStripVersionFromTitle(unittest.TestCase):
    def test_leading_bracket_tag(self):
        self.assertEqual(strip_version_from_title("[1.20] Release", "1.20"), "Release")
        self.assertEqual(strip_version_from_title("[Forge 1.19.2] Create 0.5", None), "Create 0.5")

    def test_game_version_removed(self):
        self.assertEqual(strip_version_from_title("Fabric 1.20.1-3.2.0", "1.20.1"), "Fabric 3.2.0")
        self.assertEqual(
            strip_version_from_title("Sodium 0.5.3 for MC 1.20.1", "1.20.1"),
            "Sodium 0.5.3 for",
        )

    def test_partial_version_not_removed(self):
        self.assertEqual(strip_version_from_title("Fabric 1.20.1", "1.20"), "Fabric 1.20.1")

    def test_never_destroys_information(self):
        self.assertEqual(strip_version_from_title("1.20.1", "1.20.1"), "1.20.1")
        self.assertEqual(
            strip_version_from_title("Minecraft Version 1.20.1", "1.20.1"),
            "Minecraft Version 1.20.1",
        )
        self.assertEqual(strip_version_from_title("[1.20] 000", "1.20"), "[1.20] 000")

    def test_generic_cleanup_without_context(self):
        self.assertEqual(strip_version_from_title("Create | 0.5.1.f", None), "Create 0.5.1.f")

    def test_idempotent(self):
        for raw, gv in TITLE_SAMPLES:
            once = strip_version_from_title(raw, gv)
            self.assertEqual(strip_version_from_title(once, gv), once, raw)


class TestInstalledLabel(unittest.TestCase):
    def test_modrinth_passthrough(self):
        self.assertEqual(
            format_installed_version_label("mc1.20.1-0.5.3", Provider.MODRINTH), "mc1.20.1-0.5.3"
        )

    def test_curseforge_trailing_version(self):
        self.assertEqual(
            format_installed_version_label("appleskin-forge-2.5.1.jar", Provider.CURSEFORGE),
            "2.5.1",
        )

    def test_curseforge_filename_echo(self):
        self.assertIsNone(
            format_installed_version_label("SomeMod.jar", Provider.CURSEFORGE, "somemod.jar")
        )
        self.assertEqual(format_installed_version_label("Beta", Provider.CURSEFORGE), "Beta")

    def test_version_prefix(self):
        self.assertEqual(with_version_prefix("1.0"), "v1.0")
        self.assertEqual(with_version_prefix("V2"), "V2")
        self.assertIsNone(with_version_prefix("  "))


if __name__ == "__main__":
    unittest.main()
