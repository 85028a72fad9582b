"""
File name helpers: turning layer names into safe, non-colliding file paths.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from .exceptions import ExhaustedNameSpace

logger = logging.getLogger(__name__)

FALLBACK_NAME = "Layer"
MAX_ATTEMPTS = 100
SUFFIX_DIGITS = 3

_ILLEGAL_CHARS = re.compile(r'[\\*/?:"|<>]')
_SPACE_RUNS = re.compile(r' +')


def sanitize_name(name: Optional[str]) -> str:
    """Convert an arbitrary layer name into a safe file name."""
    if not name:
        return FALLBACK_NAME

    file_name = _ILLEGAL_CHARS.sub('', name)
    file_name = _SPACE_RUNS.sub('_', file_name)

    return file_name or FALLBACK_NAME


def resolve_unique_path(directory: Union[str, Path], name: str, extension: str,
                        max_attempts: int = MAX_ATTEMPTS) -> Path:
    """Find a destination path inside ``directory`` that does not exist yet.

    ``name.ext`` is tried first; on collision the numbered variants
    ``name-001.ext``, ``name-002.ext``, ... are probed. At most
    ``max_attempts`` candidates are checked in total. Candidates are
    always direct children of ``directory``, whatever ``name`` contains.

    Args:
        directory: Destination directory
        name: Sanitized file name without extension
        extension: Target extension, with or without the leading dot

    Returns:
        The first candidate that does not exist

    Raises:
        ExhaustedNameSpace: If all candidates exist
    """
    directory = Path(directory)
    ext = extension.lstrip('.').lower()

    for attempt in range(max_attempts):
        stem = name if attempt == 0 else f"{name}-{attempt:0{SUFFIX_DIGITS}d}"
        candidate = directory / (f"{stem}.{ext}" if ext else stem)
        if not candidate.exists():
            return candidate

    logger.debug(f"All {max_attempts} names taken for {name} in {directory}")
    raise ExhaustedNameSpace(directory / name, max_attempts)
