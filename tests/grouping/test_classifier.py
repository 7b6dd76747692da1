import unittest

from changelog_sync.grouping.classifier import classify_commit, classify_commits, group_by_date
from changelog_sync.vcs.git_client import CommitRecord


def make_commit(hash_: str, message: str, date: str = "2024-01-15T10:00:00+00:00") -> CommitRecord:
    return CommitRecord(hash=hash_, date=date, author="Jane Doe", email="jane@example.com", message=message)


class TestClassifyCommit(unittest.TestCase):
    def test_classify_commit_cases(self) -> None:
        cases = [
            ("Fix crash on startup", "Fixed"),
            ("fixes #12", "Fixed"),
            ("Bugfix: null pointer", "Fixed"),
            ("Remove legacy API", "Removed"),
            ("Delete unused assets", "Removed"),
            ("Update dependencies", "Changed"),
            ("Change default port", "Changed"),
            ("Modify logging format", "Changed"),
            ("Add login page", "Added"),
            ("Refactor parser", "Added"),
            ("", "Added"),
        ]
        for message, expected in cases:
            with self.subTest(message=message):
                self.assertEqual(classify_commit(message), expected)

    def test_prefix_only(self) -> None:
        # Keywords elsewhere in the message do not count.
        self.assertEqual(classify_commit("Add fix for login"), "Added")

    def test_first_matching_rule_wins(self) -> None:
        # "fix" is checked before "update".
        self.assertEqual(classify_commit("FIX: update broke build"), "Fixed")


class TestClassifyCommits(unittest.TestCase):
    def test_partition_is_exact(self) -> None:
        commits = [
            make_commit("a1", "Add search"),
            make_commit("b2", "Fix typo"),
            make_commit("c3", "Update README"),
            make_commit("d4", "Remove dead code"),
            make_commit("e5", "Add export"),
            make_commit("f6", "bugfix: overflow"),
        ]
        buckets = classify_commits(commits)
        self.assertEqual(len(buckets), len(commits))
        seen = [c for _, bucket in buckets.items() for c in bucket]
        self.assertCountEqual(seen, commits)
        self.assertEqual([c.hash for c in buckets.added], ["a1", "e5"])
        self.assertEqual([c.hash for c in buckets.fixed], ["b2", "f6"])
        self.assertEqual([c.hash for c in buckets.changed], ["c3"])
        self.assertEqual([c.hash for c in buckets.removed], ["d4"])

    def test_empty_input(self) -> None:
        self.assertEqual(len(classify_commits([])), 0)


class TestGroupByDate(unittest.TestCase):
    def test_groups_preserve_order(self) -> None:
        commits = [
            make_commit("a1", "Add one", "2024-01-16T08:00:00+00:00"),
            make_commit("b2", "Add two", "2024-01-15T18:00:00+00:00"),
            make_commit("c3", "Add three", "2024-01-15T09:00:00+00:00"),
        ]
        grouped = group_by_date(commits)
        self.assertEqual(list(grouped), ["2024-01-16", "2024-01-15"])
        self.assertEqual([c.hash for c in grouped["2024-01-15"]], ["b2", "c3"])


if __name__ == "__main__":
    unittest.main()
