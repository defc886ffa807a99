import os
import unittest
from unittest.mock import patch

from io_ops import ArchiveBuilder, MockupArchive, contains_html, default_project_name
from .test_utils import TempDirTestCase, ZipFactory


class TestArchiveBuilder(TempDirTestCase):
    """Test directory walking and in-memory archive construction."""

    def test_collects_nested_files_with_forward_slashes(self):
        root = self.make_tree(
            {
                "index.html": "<h1>hi</h1>",
                "styles/main.css": "body{}",
                "images/icons/logo.svg": "<svg/>",
            }
        )

        archive = ArchiveBuilder().build(root)

        self.assertEqual(
            sorted(archive.paths()),
            ["images/icons/logo.svg", "index.html", "styles/main.css"],
        )
        self.assertEqual(archive.file_count, 3)

    def test_hidden_files_and_directories_are_excluded(self):
        root = self.make_tree(
            {
                "index.html": "<p>ok</p>",
                ".env": "SECRET=1",
                ".git/config": "[core]",
                ".git/objects/ab/cdef": "blob",
                "assets/.DS_Store": "junk",
                "assets/app.css": "a{}",
            }
        )

        archive = ArchiveBuilder().build(root)

        self.assertEqual(sorted(archive.paths()), ["assets/app.css", "index.html"])

    def test_hidden_root_directory_is_still_archived(self):
        root = self.make_tree({"index.html": "<p/>"}, base=".drafts")

        archive = ArchiveBuilder().build(root)

        self.assertEqual(archive.paths(), ["index.html"])

    def test_zip_bytes_preserve_content(self):
        files = {"index.html": b"<h1>hi</h1>", "data/blob.bin": bytes(range(256))}
        root = self.make_tree(files)

        data = ArchiveBuilder().build_bytes(root)

        self.assertEqual(ZipFactory.read(data), files)

    def test_directory_markers_when_requested(self):
        root = self.make_tree({"index.html": "<p/>", "css/site.css": "x{}"})

        archive = ArchiveBuilder(include_directories=True).build(root)

        self.assertIn("css/", archive.paths())
        self.assertEqual(archive.file_count, 2)

    def test_missing_directory_raises(self):
        with self.assertRaises(NotADirectoryError):
            ArchiveBuilder().build(os.path.join(self.temp_dir, "nope"))

    def test_unreadable_file_aborts_build(self):
        root = self.make_tree({"index.html": "<p/>", "broken.css": "x"})
        real_open = open

        def failing_open(path, *args, **kwargs):
            if str(path).endswith("broken.css"):
                raise PermissionError(13, "Permission denied", path)
            return real_open(path, *args, **kwargs)

        with patch("builtins.open", side_effect=failing_open):
            with self.assertRaises(PermissionError):
                ArchiveBuilder().build(root)

    def test_walk_error_aborts_build(self):
        root = self.make_tree({"index.html": "<p/>"})

        def broken_walk(top, onerror=None, **kwargs):
            onerror(FileNotFoundError(2, "No such file or directory", top))
            yield from ()

        with patch("io_ops.archive_builder.os.walk", side_effect=broken_walk):
            with self.assertRaises(FileNotFoundError):
                ArchiveBuilder().build(root)


class TestMockupArchive(unittest.TestCase):
    def test_duplicate_file_path_rejected(self):
        archive = MockupArchive()
        archive.add_file("index.html", b"a")

        with self.assertRaises(ValueError):
            archive.add_file("index.html", b"b")

    def test_total_size_counts_file_bytes(self):
        archive = MockupArchive()
        archive.add_file("a.html", b"12345")
        archive.add_directory("css")
        archive.add_file("css/b.css", b"678")

        self.assertEqual(archive.total_size, 8)
        self.assertEqual(archive.paths(), ["a.html", "css/", "css/b.css"])


class TestHtmlDetection(TempDirTestCase):
    def test_detects_html_case_insensitively(self):
        root = self.make_tree({"pages/Home.HTML": "<p/>"})
        self.assertTrue(contains_html(root))

    def test_no_html(self):
        root = self.make_tree({"readme.txt": "nothing", "style.css": "a{}"})
        self.assertFalse(contains_html(root))

    def test_directory_named_html_does_not_count(self):
        root = self.make_tree({"site.html/readme.txt": "nope"})
        self.assertFalse(contains_html(root))

    def test_default_project_name_ignores_trailing_separator(self):
        root = self.make_tree({"index.html": "<p/>"}, base="checkout-flow")
        self.assertEqual(default_project_name(root + os.sep), "checkout-flow")


if __name__ == "__main__":
    unittest.main()
