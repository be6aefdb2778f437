"""
Preview cache.

Editors re-render the preview on every repaint. The cache memoizes preview
images keyed on the source content, the shadow parameters and the background
color, so unchanged inputs are rendered once.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from threading import RLock
from typing import Sequence

from .baker import ShadowBaker
from .config import settings
from .parameters import DEFAULT_PREVIEW_BACKGROUND, ShadowParameters
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

CacheKey = tuple[str, ShadowParameters, tuple[float, ...]]


class PreviewCache:
    """Least-recently-used cache of rendered previews."""

    def __init__(self, max_entries: int | None = None):
        """
        :param max_entries: Maximum number of cached previews. Defaults to
            ``settings.PREVIEW_CACHE_SIZE``.
        """
        self.max_entries = max(
            1, settings.PREVIEW_CACHE_SIZE if max_entries is None else max_entries
        )
        self._entries: OrderedDict[CacheKey, PixelBuffer] = OrderedDict()
        self._lock = RLock()

    @staticmethod
    def make_key(
        source: PixelBuffer,
        parameters: ShadowParameters,
        background: Sequence[float] = DEFAULT_PREVIEW_BACKGROUND,
    ) -> CacheKey:
        return source.fingerprint(), parameters, tuple(float(c) for c in background)

    def get_or_render(
        self,
        source: PixelBuffer,
        parameters: ShadowParameters,
        background: Sequence[float] = DEFAULT_PREVIEW_BACKGROUND,
    ) -> PixelBuffer:
        """
        Returns the cached preview or renders and caches it.

        :param source: The source image
        :param parameters: The shadow parameters
        :param background: Preview background color
        :return: A copy of the preview, safe to modify
        """
        key = self.make_key(source, parameters, background)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                return cached.copy()

        preview = ShadowBaker(parameters).preview(source, background)

        with self._lock:
            self._entries[key] = preview
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
            logger.debug("Cached preview, %d entries", len(self._entries))
        return preview.copy()

    def invalidate(self) -> None:
        """Drops all cached previews."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
