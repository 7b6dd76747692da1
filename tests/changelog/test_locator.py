import unittest

from changelog_sync.changelog.locator import find_last_recorded_commit


class TestFindLastRecordedCommit(unittest.TestCase):
    def test_first_hash_of_history(self) -> None:
        text = (
            "# Changelog\n\n"
            "## Commit History\n\n"
            "### 2024-01-15\n"
            "- **def4567** - Add login page\n"
            "  - Author: Jane Doe (jane@example.com)\n\n"
            "### 2024-01-10\n"
            "- **abc1234** - Initial commit\n"
        )
        self.assertEqual(find_last_recorded_commit(text), "def4567")

    def test_history_wins_over_commit_field(self) -> None:
        text = (
            "## [1.0.0]\n\n**Commit:** `1234abc`\n\n"
            "## Commit History\n\n### 2024-01-15\n- **def4567** - Add login page\n"
        )
        self.assertEqual(find_last_recorded_commit(text), "def4567")

    def test_falls_back_to_commit_field(self) -> None:
        text = "# Changelog\n\n## [1.0.0] - 2024-01-01\n\n**Commit:** `1234abc`\n"
        self.assertEqual(find_last_recorded_commit(text), "1234abc")

    def test_empty_history_falls_back(self) -> None:
        text = "## Commit History\n\n---\n\n**Commit:** `1234abc`\n"
        self.assertEqual(find_last_recorded_commit(text), "1234abc")

    def test_bold_text_outside_history_is_ignored(self) -> None:
        text = "## [Unreleased]\n\n### 2024-01-15\n- **deadbeef** note\n"
        self.assertIsNone(find_last_recorded_commit(text))

    def test_first_run(self) -> None:
        self.assertIsNone(find_last_recorded_commit(""))
        self.assertIsNone(find_last_recorded_commit("# Changelog\n\n## [Unreleased]\n\n"))


if __name__ == "__main__":
    unittest.main()
