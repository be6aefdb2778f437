"""
Shadow parameters and persisted baker settings.

Three pydantic models describe the values a drop shadow is built from:

- :class:`ShadowParameters`: the immutable value set the pixel pipeline
  consumes.
- :class:`ShadowPreset`: a named, reusable set of shadow values.
- :class:`BakerSettings`: the full persisted editor settings record, the
  shadow values plus output naming and preview options.

Serialization uses camelCase aliases (``shadowColor``, ``fileNameSuffix``, ...)
so persisted settings stay readable by other tools. Colors are stored as
``[r, g, b, a]`` lists with channels in 0.0-1.0; hex strings
(``#RRGGBB`` / ``#RRGGBBAA``) and ``{"r": .., "g": .., "b": .., "a": ..}``
dicts are accepted on input.
"""

from __future__ import annotations

import json
import logging
from pathlib import PurePosixPath
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import settings
from .exceptions import SettingsError
from .pixel_buffer import RGBA

logger = logging.getLogger(__name__)

DEFAULT_SHADOW_COLOR: RGBA = (0.0, 0.0, 0.0, 0.8)
DEFAULT_PREVIEW_BACKGROUND: RGBA = (0.2, 0.2, 0.2, 1.0)


def _hex_to_color(hex_str: str) -> RGBA:
    """Convert hex color string (#RRGGBB or #RRGGBBAA) to a normalized RGBA tuple."""
    hex_str = hex_str.lstrip('#')
    if len(hex_str) == 6:
        hex_str += 'FF'
    if len(hex_str) != 8:
        raise ValueError(f"Invalid hex color: {hex_str}")
    return tuple(int(hex_str[i:i + 2], 16) / 255.0 for i in range(0, 8, 2))


def parse_color(color: Any) -> RGBA:
    """
    Parse color from various formats to a normalized RGBA tuple.

    Accepts:
    - RGB/RGBA tuple or list with channels in 0.0-1.0 (alpha defaults to 1.0)
    - Hex string: '#FF0000' or '#FF000080'
    - Dict with 'r', 'g', 'b' and optional 'a' keys

    Returns:
        RGBA tuple (0.0-1.0)
    """
    if isinstance(color, str):
        return _hex_to_color(color)
    if isinstance(color, dict):
        color = (color['r'], color['g'], color['b'], color.get('a', 1.0))
    if isinstance(color, (list, tuple)) and len(color) in (3, 4):
        channels = [float(c) for c in color]
        if len(channels) == 3:
            channels.append(1.0)
        if any(c < 0.0 or c > 1.0 for c in channels):
            raise ValueError(f"Color channels must be within 0.0-1.0: {color}")
        return tuple(channels)
    raise ValueError(f"Invalid color format: {color}")


def color_to_hex(color: RGBA) -> str:
    """Convert a normalized RGBA tuple to #RRGGBBAA."""
    return '#' + ''.join(f"{round(c * 255):02X}" for c in color)


def _check_blur_radius(value: int) -> int:
    # The cap is read at validation time, not at import
    if value > settings.MAX_BLUR_RADIUS:
        raise ValueError(
            f"Blur radius {value} exceeds the maximum of {settings.MAX_BLUR_RADIUS}"
        )
    return value


class ShadowParameters(BaseModel):
    """
    Immutable parameter set for one shadow bake or preview.

    Example:
        >>> params = ShadowParameters(angle=90, distance=6, blur_radius=4)
        >>> params.to_dict()['blurRadius']
        4
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra='ignore',
    )

    VERSION: ClassVar[int] = 1

    shadow_color: RGBA = Field(default=DEFAULT_SHADOW_COLOR, alias='shadowColor')
    opacity: float = Field(default=0.8, ge=0.0, le=1.0)
    angle: float = Field(default=135.0, ge=0.0, le=360.0)  # Degrees, 0 = +x
    distance: float = Field(default=10.0, allow_inf_nan=False)  # Pixels
    spread: float = Field(default=0.0, ge=0.0, le=1.0)
    blur_radius: int = Field(default=10, ge=0, alias='blurRadius')
    padding: int = Field(default=16, ge=0)

    @field_validator('shadow_color', mode='before')
    @classmethod
    def _parse_shadow_color(cls, value: Any) -> RGBA:
        return parse_color(value)

    @field_validator('blur_radius')
    @classmethod
    def _cap_blur_radius(cls, value: int) -> int:
        return _check_blur_radius(value)

    def replace(self, **changes: Any) -> ShadowParameters:
        """Returns a validated copy with the given fields changed."""
        data = self.model_dump()
        data.update(changes)
        return ShadowParameters.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a flat camelCase dictionary."""
        data = self.model_dump(by_alias=True, mode='json')
        data['_version'] = self.VERSION
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShadowParameters:
        """Reconstruct parameters from :meth:`to_dict` output."""
        return cls.model_validate(data)


class _ShadowFields(BaseModel):
    """Shadow values shared by presets and persisted settings."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra='ignore',
    )

    shadow_color: RGBA = Field(default=DEFAULT_SHADOW_COLOR, alias='shadowColor')
    opacity: float = Field(default=0.8, ge=0.0, le=1.0)
    angle: float = Field(default=135.0, ge=0.0, le=360.0)
    distance: float = Field(default=10.0, allow_inf_nan=False)
    spread: float = Field(default=0.0, ge=0.0, le=1.0)
    size: int = Field(default=10, ge=0)  # Blur radius
    padding: int = Field(default=16, ge=0)
    preview_background: RGBA = Field(
        default=DEFAULT_PREVIEW_BACKGROUND, alias='previewBackground'
    )

    @field_validator('shadow_color', 'preview_background', mode='before')
    @classmethod
    def _parse_colors(cls, value: Any) -> RGBA:
        return parse_color(value)

    @field_validator('size')
    @classmethod
    def _cap_size(cls, value: int) -> int:
        return _check_blur_radius(value)

    @property
    def parameters(self) -> ShadowParameters:
        """The pipeline parameters described by these values."""
        return ShadowParameters(
            shadow_color=self.shadow_color,
            opacity=self.opacity,
            angle=self.angle,
            distance=self.distance,
            spread=self.spread,
            blur_radius=self.size,
            padding=self.padding,
        )

    def _shadow_values(self) -> dict[str, Any]:
        return {
            'shadow_color': self.shadow_color,
            'opacity': self.opacity,
            'angle': self.angle,
            'distance': self.distance,
            'spread': self.spread,
            'size': self.size,
            'padding': self.padding,
            'preview_background': self.preview_background,
        }


class ShadowPreset(_ShadowFields):
    """A named set of shadow values that can be loaded into settings."""

    name: str = Field(default='Untitled')

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShadowPreset:
        return cls.model_validate(data)


class BakerSettings(_ShadowFields):
    """
    The persisted settings record of the drop shadow baker.

    Load with :meth:`from_json` and save with :meth:`to_json`; the storage
    itself (editor preferences, a file, ...) belongs to the caller.
    """

    VERSION: ClassVar[int] = 1

    output_folder: str = Field(
        default=settings.DEFAULT_OUTPUT_FOLDER, alias='outputFolder'
    )
    file_name_suffix: str = Field(
        default=settings.DEFAULT_FILE_SUFFIX, alias='fileNameSuffix'
    )
    create_shadow_image: bool = Field(
        default=True, alias='createShadowImageUnderTarget'
    )

    @field_validator('output_folder', mode='before')
    @classmethod
    def _default_output_folder(cls, value: Any) -> Any:
        # Empty values keep the default
        if not value:
            logger.warning(
                "Empty output folder, using default %r", settings.DEFAULT_OUTPUT_FOLDER
            )
            return settings.DEFAULT_OUTPUT_FOLDER
        return value

    @field_validator('file_name_suffix', mode='before')
    @classmethod
    def _default_file_suffix(cls, value: Any) -> Any:
        if not value:
            logger.warning(
                "Empty file name suffix, using default %r", settings.DEFAULT_FILE_SUFFIX
            )
            return settings.DEFAULT_FILE_SUFFIX
        return value

    def output_name(self, sprite_name: str) -> str:
        """File name of the baked shadow for a sprite, e.g. ``button_shadow.png``."""
        return f"{sprite_name}{self.file_name_suffix}.png"

    def output_path(self, sprite_name: str) -> PurePosixPath:
        """
        Path of the baked shadow inside the output folder.

        Backslashes are normalized to forward slashes. No file system access
        takes place.
        """
        folder = self.output_folder.replace('\\', '/')
        return PurePosixPath(folder) / self.output_name(sprite_name)

    def apply_preset(self, preset: ShadowPreset) -> BakerSettings:
        """Returns new settings with the preset's shadow values loaded."""
        return self.model_copy(update=preset._shadow_values())

    def to_preset(self, name: str) -> ShadowPreset:
        """Captures the current shadow values as a preset."""
        return ShadowPreset(name=name, **self._shadow_values())

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, mode='json')
        data['_version'] = self.VERSION
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BakerSettings:
        """
        Reconstruct settings from a dictionary.

        Raises a SettingsError if the values are invalid.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SettingsError(f"Invalid baker settings: {e}") from e

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> BakerSettings:
        """
        Reconstruct settings from :meth:`to_json` output.

        Raises a SettingsError for malformed JSON or invalid values.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SettingsError(f"Settings are not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError("Settings JSON must be an object")
        return cls.from_dict(data)
