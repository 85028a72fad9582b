"""
Tests for utility functions.
"""

import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch, mock_open

from layer_exporter.utils import (
    load_config,
    validate_manifest_path,
    create_output_directory,
    format_duration,
    setup_logging
)


class TestUtils(unittest.TestCase):
    """Test cases for utility functions."""

    def test_load_config_success(self):
        """Test successful configuration loading."""
        yaml_content = """
        export:
          format: jpg
          visible_only: true
        progress:
          enabled: false
        """

        with patch("builtins.open", mock_open(read_data=yaml_content)):
            with patch("pathlib.Path.exists", return_value=True):
                config = load_config("config.yaml")

        self.assertIn("export", config)
        self.assertEqual(config["export"]["format"], "jpg")
        self.assertTrue(config["export"]["visible_only"])
        self.assertFalse(config["progress"]["enabled"])

    def test_load_config_file_not_found(self):
        """Test configuration loading with missing file."""
        with self.assertRaises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_load_config_empty_file(self):
        """Test configuration loading with empty file."""
        with patch("builtins.open", mock_open(read_data="")):
            with patch("pathlib.Path.exists", return_value=True):
                config = load_config("config.yaml")

        self.assertEqual(config, {})

    def test_validate_manifest_path_success(self):
        """Test successful manifest path validation."""
        with tempfile.NamedTemporaryFile(suffix=".yaml", delete=False) as tmp:
            tmp_path = Path(tmp.name)

        try:
            result = validate_manifest_path(str(tmp_path))
            self.assertEqual(result, tmp_path)
        finally:
            tmp_path.unlink()

    def test_validate_manifest_path_not_found(self):
        """Test manifest path validation with missing file."""
        with self.assertRaises(FileNotFoundError):
            validate_manifest_path("nonexistent.yaml")

    def test_validate_manifest_path_wrong_extension(self):
        """Test manifest path validation with wrong file extension."""
        with tempfile.NamedTemporaryFile(suffix=".txt", delete=False) as tmp:
            tmp_path = Path(tmp.name)

        try:
            with self.assertRaises(ValueError):
                validate_manifest_path(str(tmp_path))
        finally:
            tmp_path.unlink()

    def test_validate_manifest_path_directory(self):
        """Test manifest path validation with a directory."""
        with tempfile.TemporaryDirectory(suffix=".yml") as tmp_dir:
            with self.assertRaises(ValueError):
                validate_manifest_path(tmp_dir)

    def test_create_output_directory_new(self):
        """Test creating a new output directory."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            output_path = Path(tmp_dir) / "new_directory"
            result = create_output_directory(str(output_path))

            self.assertTrue(result.exists())
            self.assertTrue(result.is_dir())

    def test_create_output_directory_existing(self):
        """Test creating output directory that already exists."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            output_path = Path(tmp_dir)
            result = create_output_directory(str(output_path))

            self.assertEqual(result, output_path)
            self.assertTrue(result.exists())

    def test_load_config_rejects_non_mapping(self):
        """Test that a configuration must be a mapping of sections."""
        with patch("builtins.open", mock_open(read_data="- export\n- progress\n")):
            with patch("pathlib.Path.exists", return_value=True):
                with self.assertRaises(ValueError):
                    load_config("config.yaml")

    def test_create_output_directory_rejects_file(self):
        """Test that an existing file cannot be used as destination."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            file_path = Path(tmp_dir) / "taken"
            file_path.write_text("x")

            with self.assertRaises(NotADirectoryError):
                create_output_directory(file_path)

    def test_setup_logging_keeps_pillow_quiet(self):
        """Test that verbose logging does not enable Pillow debug output."""
        pil_logger = logging.getLogger("PIL")
        previous = pil_logger.level
        try:
            setup_logging("DEBUG")
            self.assertEqual(pil_logger.level, logging.INFO)
        finally:
            pil_logger.setLevel(previous)

    def test_format_duration(self):
        """Test duration formatting."""
        self.assertEqual(format_duration(0), "00:00:00.000")
        self.assertEqual(format_duration(1.5), "00:00:01.500")
        self.assertEqual(format_duration(3723.042), "01:02:03.042")


if __name__ == "__main__":
    unittest.main()
