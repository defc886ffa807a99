import os
import unittest
from pathlib import Path

from io_ops import VersionStorage
from .test_utils import TempDirTestCase


class TestVersionStorage(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.root = os.path.join(self.temp_dir, "uploads")
        self.storage = VersionStorage(self.root)

    def test_storage_root_created(self):
        self.assertTrue(os.path.isdir(self.root))

    def test_version_root_is_storage_root_plus_id(self):
        version = self.storage.version("v1")

        self.assertEqual(version.version_id, "v1")
        self.assertEqual(version.root, Path(self.root) / "v1")

    def test_resolve_path_is_a_plain_join(self):
        self.assertEqual(
            self.storage.resolve_path("v1", "css/site.css"),
            Path(self.root) / "v1" / "css" / "site.css",
        )
        # No existence check
        self.assertFalse(self.storage.resolve_path("v9", "missing.html").exists())

    def test_resolve_path_does_not_guard_traversal(self):
        resolved = self.storage.resolve_path("v1", "../v2/index.html")
        self.assertEqual(resolved, Path(self.root, "v1", "..", "v2", "index.html"))

    def test_list_html_files_top_level_only(self):
        version_root = Path(self.root) / "v1"
        (version_root / "pages").mkdir(parents=True)
        (version_root / "index.html").write_text("<p/>")
        (version_root / "About.HTML").write_text("<p/>")
        (version_root / "style.css").write_text("a{}")
        (version_root / "pages" / "nested.html").write_text("<p/>")
        (version_root / "folder.html").mkdir()

        self.assertEqual(
            self.storage.list_html_files("v1"), ["About.HTML", "index.html"]
        )

    def test_list_html_files_missing_version(self):
        with self.assertRaises(FileNotFoundError):
            self.storage.list_html_files("does-not-exist")


if __name__ == "__main__":
    unittest.main()
