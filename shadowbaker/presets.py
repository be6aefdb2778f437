# Preset Registry - Built-in and user shadow presets
"""
Registry of shadow presets.

Built-in presets are available through :data:`PRESETS` and
:func:`get_preset`. User presets live in a :class:`PresetLibrary`, which
serializes to JSON so the caller can persist it wherever it keeps settings.

Usage:
    from shadowbaker.presets import get_preset, PresetLibrary

    settings = BakerSettings().apply_preset(get_preset('soft'))

    library = PresetLibrary()
    library.add(settings.to_preset('My Shadow'))
    text = library.to_json()
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from .exceptions import PresetNotFoundError, SettingsError
from .parameters import ShadowPreset

logger = logging.getLogger(__name__)


PRESETS: dict[str, ShadowPreset] = {
    'default': ShadowPreset(
        name='Default',
        shadow_color=(0.0, 0.0, 0.0, 0.8),
        opacity=0.8,
        angle=135.0,
        distance=10.0,
        spread=0.0,
        size=10,
        padding=16,
    ),
    'soft': ShadowPreset(
        name='Soft',
        shadow_color=(0.0, 0.0, 0.0, 1.0),
        opacity=0.5,
        angle=90.0,
        distance=6.0,
        spread=0.0,
        size=16,
        padding=8,
    ),
    'hard': ShadowPreset(
        name='Hard',
        shadow_color=(0.0, 0.0, 0.0, 1.0),
        opacity=0.9,
        angle=45.0,
        distance=4.0,
        spread=0.6,
        size=2,
        padding=4,
    ),
    'long': ShadowPreset(
        name='Long',
        shadow_color=(0.1, 0.1, 0.2, 1.0),
        opacity=0.6,
        angle=45.0,
        distance=24.0,
        spread=0.2,
        size=8,
        padding=8,
    ),
    'glow': ShadowPreset(
        name='Glow',
        shadow_color=(1.0, 1.0, 1.0, 1.0),
        opacity=1.0,
        angle=0.0,
        distance=0.0,
        spread=0.5,
        size=12,
        padding=4,
        preview_background=(0.05, 0.05, 0.05, 1.0),
    ),
}


def get_preset(key: str) -> ShadowPreset:
    """
    Look up a built-in preset.

    Raises a PresetNotFoundError for unknown keys.
    """
    if key not in PRESETS:
        raise PresetNotFoundError(f"Unknown preset: {key}")
    return PRESETS[key]


def list_presets() -> list[str]:
    """Keys of all built-in presets."""
    return list(PRESETS.keys())


class PresetLibrary:
    """A mutable collection of named user presets."""

    def __init__(self, presets: list[ShadowPreset] | None = None):
        self._presets: dict[str, ShadowPreset] = {}
        for preset in presets or []:
            self.add(preset)

    def add(self, preset: ShadowPreset) -> None:
        """Adds a preset, replacing any preset of the same name."""
        if preset.name in self._presets:
            logger.debug("Replacing preset %r", preset.name)
        self._presets[preset.name] = preset

    def remove(self, name: str) -> None:
        if name not in self._presets:
            raise PresetNotFoundError(f"Unknown preset: {name}")
        del self._presets[name]

    def get(self, name: str) -> ShadowPreset:
        if name not in self._presets:
            raise PresetNotFoundError(f"Unknown preset: {name}")
        return self._presets[name]

    def names(self) -> list[str]:
        return sorted(self._presets)

    def __contains__(self, name: str) -> bool:
        return name in self._presets

    def __len__(self) -> int:
        return len(self._presets)

    def to_dict(self) -> dict[str, Any]:
        return {'presets': [self._presets[name].to_dict() for name in self.names()]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PresetLibrary:
        try:
            presets = [ShadowPreset.from_dict(item) for item in data.get('presets', [])]
        except ValidationError as e:
            raise SettingsError(f"Invalid preset: {e}") from e
        return cls(presets)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> PresetLibrary:
        """
        Reconstruct a library from :meth:`to_json` output.

        Raises a SettingsError for malformed JSON or invalid presets.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SettingsError(f"Presets are not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError("Preset JSON must be an object")
        return cls.from_dict(data)
