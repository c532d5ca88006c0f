from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Union
import logging
import math
import os
import numpy as np
from dotenv import load_dotenv

from ..errors import DomainError, FormatError, InvalidArgumentError
from ..repositories.backing_store import RasterBackingStore

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_LABEL = os.getenv("RASTER_DEFAULT_LABEL", "new_img.png")
SUPPORTED_CHANNELS = (1, 3)

# Luminance weights for R, G, B
GRAY_WEIGHTS = (0.3, 0.59, 0.11)


def _check_channels(channels: int, error: type) -> None:
    if channels not in SUPPORTED_CHANNELS:
        raise error(
            f"Wrong image format: {channels} channels; only RGB and Grayscale supported"
        )


@dataclass
class RasterImage:
    """
    Grayscale (1 channel) or RGB (3 channels) image over a uniquely-owned
    backing store. Width, height and channel count mirror the store's shape.

    Two families of accessors:
      * `at` is checked and interpolates bilinearly.
      * `discrete_at` and `at_h` skip every check; callers validate first.
    """
    store: RasterBackingStore
    width: int
    height: int
    channels: int
    source_path: str = DEFAULT_SOURCE_LABEL

    # ── Construction ─────────────────────────────────────────────────
    @classmethod
    def from_file(cls, path: Union[str, Path]) -> RasterImage:
        """
        Decode `path` into a new image.

        Raises:
            FormatError: the file is neither grayscale nor RGB.
            FileNotFoundError: nothing readable at `path`.
        """
        store = RasterBackingStore.decode(path)
        _check_channels(store.channels, FormatError)
        logger.debug(f"Loaded {path} ({store.width}x{store.height}x{store.channels})")
        return cls(store, store.width, store.height, store.channels, str(path))

    @classmethod
    def with_size(
        cls,
        width: int,
        height: int,
        channels: int,
        fill_value: float | None = None,
    ) -> RasterImage:
        """
        Allocate a width x height image. Samples are left uninitialised
        unless `fill_value` is given.

        Raises:
            InvalidArgumentError: `channels` is not 1 or 3.
        """
        _check_channels(channels, InvalidArgumentError)
        store = RasterBackingStore.allocate(width, height, channels, fill_value)
        return cls(store, store.width, store.height, store.channels)

    @classmethod
    def adopt(cls, store: RasterBackingStore) -> RasterImage:
        """
        Take ownership of an already-populated store; `store` is left empty.
        The channel count is trusted as is.
        """
        owned = store.move_to(RasterBackingStore())
        return cls(owned, owned.width, owned.height, owned.channels)

    def assign(self, store: RasterBackingStore) -> RasterImage:
        """Replace the current buffer with `store`'s, moving it in."""
        self.store = store.move_to(RasterBackingStore())
        self.width = self.store.width
        self.height = self.store.height
        self.channels = self.store.channels
        self.source_path = DEFAULT_SOURCE_LABEL
        return self

    def copy(self) -> RasterImage:
        return replace(self, store=self.store.copy())

    # ── Dimensions ───────────────────────────────────────────────────
    def size(self, axis: int) -> int:
        """
        Args:
            axis (int): 0 for width, 1 for height, 2 for channels.
        """
        if axis == 0:
            return self.width
        if axis == 1:
            return self.height
        if axis == 2:
            return self.channels
        raise DomainError(f"size(). {axis} is not a dimension {{0,1,2}}")

    @property
    def pixels(self) -> np.ndarray:
        return self.store.pixels

    # ── Sampling ─────────────────────────────────────────────────────
    def discrete_at(self, x: int, y: int, channel: int) -> float:
        """Raw sample, no interpolation and no bounds check."""
        return self.store.read(x, y, channel)

    def at(self, wx: float, hy: float, channel: int) -> float:
        """
        Intensity of `channel` at continuous coordinates (wx, hy), obtained by
        bilinear interpolation between the four surrounding samples.

        Args:
            wx (float): coordinate along the width, in [0, width-1].
            hy (float): coordinate along the height, in [0, height-1].
            channel (int): channel to read.

        Returns:
            (float): the interpolated intensity.

        Raises:
            DomainError: wrong channel, or coordinates outside the image.
        """
        if not 0 <= channel < self.channels:
            raise DomainError(
                f"at(). Wrong channel, {channel} of [0, {self.channels - 1}]"
            )
        if not (0 <= wx <= self.width - 1 and 0 <= hy <= self.height - 1):
            raise DomainError(
                f"at(). Wrong coordinate, ({wx}, {hy}) of (0, 0) -- "
                f"({self.width - 1}, {self.height - 1})"
            )

        w_low, w_high = math.floor(wx), math.ceil(wx)
        h_low, h_high = math.floor(hy), math.ceil(hy)
        x = wx - w_low
        y = hy - h_low

        z00 = self.store.read(w_low, h_low, channel)
        z01 = self.store.read(w_low, h_high, channel)
        z10 = self.store.read(w_high, h_low, channel)
        z11 = self.store.read(w_high, h_high, channel)

        return (z00 * (1 - x) * (1 - y)
                + z10 * x * (1 - y)
                + z01 * (1 - x) * y
                + z11 * x * y)

    def at_h(self, wx: float, h: int, channel: int) -> float:
        """
        Linear interpolation along the width only, on row `h`.
        NOTE: bounds are not checked. Use `at` for the checked 2-D version.
        """
        w_low, w_high = math.floor(wx), math.ceil(wx)
        x = wx - w_low

        z0 = self.store.read(w_low, h, channel)
        z1 = self.store.read(w_high, h, channel)

        return z0 * (1 - x) + z1 * x

    # ── Conversion ───────────────────────────────────────────────────
    def to_grayscale(self) -> RasterImage:
        """
        New single-channel image computed with the luminance formula
        0.3 R + 0.59 G + 0.11 B. Values are neither rounded nor clamped.
        A grayscale source is returned as an independent copy.
        """
        if self.channels == 1:
            return self.copy()

        rgb = self.store.pixels
        r_w, g_w, b_w = GRAY_WEIGHTS
        gray = rgb[:, :, 0] * r_w + rgb[:, :, 1] * g_w + rgb[:, :, 2] * b_w
        return RasterImage.adopt(RasterBackingStore.from_array(gray))

    def __str__(self):
        return f"Image: {self.source_path}, size: ({self.width},{self.height},{self.channels})"
