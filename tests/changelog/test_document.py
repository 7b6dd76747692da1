import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from changelog_sync.changelog.document import (
    HISTORY_HEADER,
    UNRELEASED_HEADER,
    Block,
    ChangelogError,
    load_changelog,
    parse_changelog,
    save_changelog,
)


SAMPLE = (
    "# Changelog\n"
    "\n"
    "## [Unreleased]\n"
    "\n"
    "### Added\n"
    "- Something (abc1234)\n"
    "\n"
    "## [1.0.0] - 2024-01-01\n"
    "\n"
    "**Commit:** `1234abc`\n"
    "\n"
    "---\n"
    "\n"
    "## Commit History\n"
    "\n"
    "### 2024-01-10\n"
    "- **abc123** - Initial commit\n"
)


class TestParseChangelog(unittest.TestCase):
    def test_round_trip_is_lossless(self) -> None:
        samples = [
            SAMPLE,
            "",
            "no headings at all",
            "## Commit History",
            "# Title\r\n\r\n## [Unreleased]\r\n\r\n",
        ]
        for text in samples:
            with self.subTest(text=text[:20]):
                self.assertEqual(parse_changelog(text).serialize(), text)

    def test_blocks(self) -> None:
        document = parse_changelog(SAMPLE)
        headings = [block.heading for block in document.blocks]
        self.assertEqual(
            headings,
            ["", "## [Unreleased]", "## [1.0.0] - 2024-01-01", "---", "## Commit History"],
        )
        self.assertEqual(document.blocks[0].render(), "# Changelog\n\n")
        self.assertEqual(document.index_of(UNRELEASED_HEADER), 1)
        self.assertIn("### Added", document.blocks[1].body)
        self.assertTrue(document.has_history)
        self.assertTrue(document.history_entries.startswith("\n### 2024-01-10"))

    def test_level_three_headings_are_not_boundaries(self) -> None:
        document = parse_changelog("## [Unreleased]\n### Added\n- x\n")
        self.assertEqual(len(document.blocks), 2)

    def test_missing_sections(self) -> None:
        document = parse_changelog("# Changelog\n")
        self.assertIsNone(document.index_of(UNRELEASED_HEADER))
        self.assertFalse(document.has_history)
        self.assertEqual(document.history_entries, "")

    def test_with_body_keeps_heading(self) -> None:
        document = parse_changelog("## Commit History")
        updated = document.with_body(1, "\nbody\n")
        self.assertEqual(updated.serialize(), "## Commit History\n\nbody\n")
        # the original is untouched
        self.assertEqual(document.serialize(), "## Commit History")

    def test_with_appended_pads_with_blank_line(self) -> None:
        block = Block(heading_line=HISTORY_HEADER + "\n", body="\nx\n")
        cases = [
            ("# Title", "# Title\n\n## Commit History\n\nx\n"),
            ("# Title\n", "# Title\n\n## Commit History\n\nx\n"),
            ("# Title\n\n", "# Title\n\n## Commit History\n\nx\n"),
            ("", "## Commit History\n\nx\n"),
        ]
        for text, expected in cases:
            with self.subTest(text=text):
                self.assertEqual(parse_changelog(text).with_appended(block).serialize(), expected)


class TestStorage(unittest.TestCase):
    def test_load_strips_bom(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "CHANGELOG.md"
            path.write_text("\ufeff# Changelog\n", encoding="utf-8")
            self.assertEqual(load_changelog(path), "# Changelog\n")

    def test_load_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ChangelogError):
                load_changelog(Path(tmp) / "missing.md")

    def test_save_replaces_content(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "CHANGELOG.md"
            path.write_text("old", encoding="utf-8")
            save_changelog(path, "# Changelog\n\nnew ✓\n")
            self.assertEqual(path.read_text(encoding="utf-8"), "# Changelog\n\nnew ✓\n")
            # no temporary files are left behind
            self.assertEqual([p.name for p in Path(tmp).iterdir()], ["CHANGELOG.md"])

    def test_save_failure_leaves_file_untouched(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "CHANGELOG.md"
            path.write_text("old", encoding="utf-8")
            with patch("changelog_sync.changelog.document.os.replace", side_effect=OSError("denied")):
                with self.assertRaises(ChangelogError):
                    save_changelog(path, "new")
            self.assertEqual(path.read_text(encoding="utf-8"), "old")
            self.assertEqual([p.name for p in Path(tmp).iterdir()], ["CHANGELOG.md"])


if __name__ == "__main__":
    unittest.main()
