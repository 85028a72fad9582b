"""
Output file formats and their encoder settings.

Each format is one options dataclass. To add a format, add a subclass of
FormatOptions and register it in FORMATS.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, List, Optional, Type

from PIL import Image

JPEG_WHITE = (255, 255, 255)


class FormatOptions(ABC):
    """Format-specific encoder settings."""

    format_name: str = ""
    extension: str = ""

    @abstractmethod
    def validate(self) -> List[str]:
        """Validate the options. Returns list of validation errors."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Short human readable description of the settings."""
        pass

    @abstractmethod
    def prepare(self, image: Image.Image) -> Image.Image:
        """Convert a composited RGBA image into what the encoder expects."""
        pass

    @abstractmethod
    def save_params(self) -> Dict[str, Any]:
        """Keyword arguments for ``Image.save``."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['format'] = self.format_name
        return result


@dataclass(frozen=True)
class PNGOptions(FormatOptions):
    """PNG, either 24-bit with alpha or 8-bit palette."""

    png8: bool = False

    format_name = "PNG"
    extension = "png"

    def validate(self) -> List[str]:
        return []

    def describe(self) -> str:
        return "PNG, 8 bit" if self.png8 else "PNG, 24 bit"

    def prepare(self, image: Image.Image) -> Image.Image:
        if self.png8:
            return image.quantize(colors=256, method=Image.Quantize.FASTOCTREE,
                                  dither=Image.Dither.NONE)
        return image

    def save_params(self) -> Dict[str, Any]:
        return {'format': 'PNG', 'optimize': True}


@dataclass(frozen=True)
class JPEGOptions(FormatOptions):
    """JPEG with quality on a 1 (lowest) to 12 (highest) scale."""

    quality: int = 12

    format_name = "JPG"
    extension = "jpg"

    MIN_QUALITY = 1
    MAX_QUALITY = 12

    def validate(self) -> List[str]:
        errors = []
        if not self.MIN_QUALITY <= self.quality <= self.MAX_QUALITY:
            errors.append(f"JPEG quality must be between {self.MIN_QUALITY} and {self.MAX_QUALITY}")
        return errors

    def describe(self) -> str:
        return f"JPEG, quality {self.quality}"

    @property
    def encoder_quality(self) -> int:
        # Map 1..12 linearly onto Pillow's useful range 5..95
        return int(round(5 + (self.quality - 1) * 90 / 11))

    def prepare(self, image: Image.Image) -> Image.Image:
        flattened = Image.new("RGB", image.size, JPEG_WHITE)
        flattened.paste(image, mask=image.getchannel("A"))
        return flattened

    def save_params(self) -> Dict[str, Any]:
        return {'format': 'JPEG', 'quality': self.encoder_quality}


@dataclass(frozen=True)
class TargaOptions(FormatOptions):
    """Targa with 24 or 32 bits per pixel."""

    bits_per_pixel: int = 32
    alpha_channel: bool = True
    rle_compression: bool = True

    format_name = "TGA"
    extension = "tga"

    SUPPORTED_DEPTHS = (24, 32)

    def validate(self) -> List[str]:
        errors = []
        if self.bits_per_pixel not in self.SUPPORTED_DEPTHS:
            errors.append(f"Targa depth must be one of {self.SUPPORTED_DEPTHS}")
        if self.alpha_channel and self.bits_per_pixel != 32:
            errors.append("Targa alpha channel requires 32 bits per pixel")
        return errors

    def describe(self) -> str:
        parts = [f"TGA, {self.bits_per_pixel} bit"]
        if self.alpha_channel:
            parts.append("alpha")
        if self.rle_compression:
            parts.append("RLE")
        return ", ".join(parts)

    def prepare(self, image: Image.Image) -> Image.Image:
        if self.bits_per_pixel == 24:
            return image.convert("RGB")
        if not self.alpha_channel:
            opaque = image.copy()
            opaque.putalpha(255)
            return opaque
        return image

    def save_params(self) -> Dict[str, Any]:
        params = {'format': 'TGA'}
        if self.rle_compression:
            params['compression'] = 'tga_rle'
        return params


FORMATS: Dict[str, Type[FormatOptions]] = {
    'png': PNGOptions,
    'jpg': JPEGOptions,
    'jpeg': JPEGOptions,
    'tga': TargaOptions,
    'targa': TargaOptions,
}


def canonical_format_name(name: str) -> str:
    """Map a format name or alias (jpeg, targa) to its canonical key."""
    key = name.lower().lstrip('.')
    if key not in FORMATS:
        raise ValueError(f"Unsupported format: {name}")
    return FORMATS[key].extension


def format_options_for(options_config: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """Look up the configured options of a format under its canonical key."""
    options_config = options_config or {}
    key = canonical_format_name(name)
    params = options_config.get(key)
    if params is None:
        params = options_config.get(name)
    return dict(params or {})


def build_format_options(name: str, **params) -> FormatOptions:
    """Create format options by format name."""
    options_class = FORMATS[canonical_format_name(name)]
    known = {f.name for f in fields(options_class)}
    unknown = sorted(set(params) - known)
    if unknown:
        raise ValueError(f"Unknown {options_class.format_name} options: {', '.join(unknown)}")

    return options_class(**params)
