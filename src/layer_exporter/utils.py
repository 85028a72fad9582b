"""
Utility functions for the layer exporter.
"""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Pillow logs every PNG chunk it reads at DEBUG level
NOISY_LOGGERS = ("PIL",)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging for an export run.

    Pillow's own loggers stay at INFO so that ``--verbose`` shows layer
    export details rather than image decoder chatter.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.INFO))


def load_config(config_path: str) -> Dict[str, Any]:
    """Load the exporter configuration (export, progress and logging sections)."""
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, 'r') as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Configuration must be a mapping of sections: {config_path}")

    return config


def validate_manifest_path(manifest_path: str) -> Path:
    """Validate that a document manifest path exists and is a YAML file."""
    path = Path(manifest_path)

    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    if path.suffix.lower() not in ('.yaml', '.yml'):
        raise ValueError(f"Manifest is not a YAML file: {manifest_path}")

    if not path.is_file():
        raise ValueError(f"Path is not a file: {manifest_path}")

    return path


def create_output_directory(output_path: Union[str, Path]) -> Path:
    """Create the destination directory for exported layers if needed."""
    path = Path(output_path)
    if path.exists() and not path.is_dir():
        raise NotADirectoryError(f"Destination is not a directory: {output_path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


def format_duration(seconds: float) -> str:
    """Format a duration as HH:MM:SS.mmm."""
    total_ms = int(round(seconds * 1000))
    hours, rest = divmod(total_ms, 3600 * 1000)
    minutes, rest = divmod(rest, 60 * 1000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"
