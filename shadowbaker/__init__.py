"""
shadowbaker - Drop shadow baking for sprites and UI images

Example:
    >>> from shadowbaker import PixelBuffer, ShadowParameters, bake_shadow
    >>> source = PixelBuffer.from_pil(PIL.Image.open("button.png"))
    >>> result = bake_shadow(source, ShadowParameters(distance=8, blur_radius=6))
    >>> png_data = result.to_png_bytes()
    >>> result.pivot  # source center inside the shadow image
"""

from .pixel_buffer import PixelBuffer, RGBA
from .geometry import CanvasGeometry, compute_canvas_geometry, shadow_offset
from .projector import project_shadow
from .blur import gaussian_blur, gaussian_kernel
from .spread import apply_spread, spread_exponent
from .compositor import composite_over, composite_at, compose_preview
from .parameters import ShadowParameters, ShadowPreset, BakerSettings, parse_color
from .baker import ShadowBaker, BakeResult, bake_shadow, render_preview
from .cache import PreviewCache
from .presets import PRESETS, PresetLibrary, get_preset, list_presets
from .exceptions import (
    ShadowBakerError,
    InvalidBufferError,
    PresetNotFoundError,
    SettingsError,
)

__all__ = [
    # Pixel data
    "PixelBuffer",
    "RGBA",
    # Pipeline stages
    "CanvasGeometry",
    "compute_canvas_geometry",
    "shadow_offset",
    "project_shadow",
    "gaussian_blur",
    "gaussian_kernel",
    "apply_spread",
    "spread_exponent",
    "composite_over",
    "composite_at",
    "compose_preview",
    # Parameters and settings
    "ShadowParameters",
    "ShadowPreset",
    "BakerSettings",
    "parse_color",
    # Baking
    "ShadowBaker",
    "BakeResult",
    "bake_shadow",
    "render_preview",
    "PreviewCache",
    # Presets
    "PRESETS",
    "PresetLibrary",
    "get_preset",
    "list_presets",
    # Errors
    "ShadowBakerError",
    "InvalidBufferError",
    "PresetNotFoundError",
    "SettingsError",
]

__version__ = "0.1.0"
