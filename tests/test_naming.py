"""
Tests for file name sanitizing and unique path resolution.
"""

import tempfile
import unittest
from pathlib import Path

from layer_exporter.exceptions import ExhaustedNameSpace
from layer_exporter.naming import resolve_unique_path, sanitize_name

ILLEGAL = '\\*/?:"|<>'


class TestSanitizeName(unittest.TestCase):
    """Test cases for sanitize_name."""

    def test_empty_name_falls_back(self):
        """Test that an empty name becomes 'Layer'."""
        self.assertEqual(sanitize_name(""), "Layer")
        self.assertEqual(sanitize_name(None), "Layer")

    def test_strips_illegal_characters(self):
        """Test that every illegal character is removed."""
        self.assertEqual(sanitize_name('a\\b*c/d?e:f"g|h<i>j'), "abcdefghij")

    def test_only_illegal_characters_falls_back(self):
        """Test that a name made of illegal characters becomes 'Layer'."""
        self.assertEqual(sanitize_name('**//??'), "Layer")

    def test_space_runs_become_single_underscore(self):
        """Test that runs of spaces are replaced by one underscore."""
        self.assertEqual(sanitize_name("my  layer name"), "my_layer_name")
        self.assertEqual(sanitize_name("a / b"), "a_b")

    def test_spaces_only(self):
        """Test a name of spaces only."""
        self.assertEqual(sanitize_name("   "), "_")

    def test_result_is_always_safe(self):
        """Test that results never contain illegal characters or spaces."""
        samples = ["Layer 1", "", "  x  ", 'He said "hi"', "a<b>c|d", "C:\\tmp\\x", "ok", "é à", "*"]
        for name in samples:
            result = sanitize_name(name)
            self.assertTrue(result)
            self.assertFalse(any(ch in result for ch in ILLEGAL), result)
            self.assertNotIn(" ", result)

    def test_keeps_other_characters(self):
        """Test that dots, dashes and unicode are kept."""
        self.assertEqual(sanitize_name("v1.2-final_é"), "v1.2-final_é")


class TestResolveUniquePath(unittest.TestCase):
    """Test cases for resolve_unique_path."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmp = tempfile.TemporaryDirectory()
        self.directory = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_free_name_is_used_directly(self):
        """Test that a free name gets no suffix."""
        result = resolve_unique_path(self.directory, "A", "png")
        self.assertEqual(result, self.directory / "A.png")

    def test_collision_adds_padded_suffix(self):
        """Test that a collision adds a 3 digit suffix."""
        (self.directory / "A.png").touch()
        result = resolve_unique_path(self.directory, "A", "png")
        self.assertEqual(result, self.directory / "A-001.png")

        result.touch()
        result = resolve_unique_path(self.directory, "A", "png")
        self.assertEqual(result, self.directory / "A-002.png")

    def test_idempotent_without_file_creation(self):
        """Test that repeated calls return the same path."""
        (self.directory / "A.png").touch()
        first = resolve_unique_path(self.directory, "A", "png")
        second = resolve_unique_path(self.directory, "A", "png")
        self.assertEqual(first, second)
        self.assertFalse(first.exists())

    def test_extension_is_normalized(self):
        """Test that the extension is lower-cased and the dot optional."""
        result = resolve_unique_path(self.directory, "A", ".PNG")
        self.assertEqual(result.name, "A.png")

    def test_dots_in_base_name_are_kept(self):
        """Test that dots in the base name are not treated as a suffix."""
        result = resolve_unique_path(self.directory, "v1.2", "jpg")
        self.assertEqual(result.name, "v1.2.jpg")

    def test_exhausted_name_space(self):
        """Test that 100 taken names raise ExhaustedNameSpace."""
        (self.directory / "A.png").touch()
        for i in range(1, 100):
            (self.directory / f"A-{i:03d}.png").touch()

        with self.assertRaises(ExhaustedNameSpace) as ctx:
            resolve_unique_path(self.directory, "A", "png")

        self.assertEqual(ctx.exception.attempts, 100)
        self.assertEqual(ctx.exception.base, self.directory / "A")

    def test_last_candidate_is_099(self):
        """Test that -099 is the last probed candidate."""
        (self.directory / "A.png").touch()
        for i in range(1, 99):
            (self.directory / f"A-{i:03d}.png").touch()

        result = resolve_unique_path(self.directory, "A", "png")
        self.assertEqual(result.name, "A-099.png")

    def test_custom_attempt_limit(self):
        """Test a smaller attempt limit."""
        (self.directory / "A.png").touch()
        (self.directory / "A-001.png").touch()

        with self.assertRaises(ExhaustedNameSpace):
            resolve_unique_path(self.directory, "A", "png", max_attempts=2)

    def test_no_files_created(self):
        """Test that resolving does not create files."""
        resolve_unique_path(self.directory, "A", "png")
        self.assertEqual(list(self.directory.iterdir()), [])


if __name__ == "__main__":
    unittest.main()
