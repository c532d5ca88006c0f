from __future__ import annotations
from pathlib import Path
from typing import Union
import logging
import os
import signal
import threading
import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DECODE_TIMEOUT = int(os.getenv("RASTER_DECODE_TIMEOUT", "5"))


class RasterBackingStore:
    """
    Uniquely-owned dense pixel buffer.

    Samples live in a float64 array of shape (H, W, C) and are addressed as
    (x, y, channel), x running along the width. Indexed reads and writes are
    not bounds-checked here: numpy raises IndexError past the far edge and
    wraps negative indices.
    """

    def __init__(self, pixels: np.ndarray | None = None):
        if pixels is None:
            pixels = np.empty((0, 0, 0), dtype=np.float64)
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        if pixels.ndim != 3:
            raise ValueError(f"Expected an (H, W) or (H, W, C) array, got shape {pixels.shape}")
        self._pixels = pixels

    # ─── construction ────────────────────────────────────────────────
    @classmethod
    def from_array(cls, pixels) -> RasterBackingStore:
        """
        Copy an (H, W) or (H, W, C) array into a new store.
        """
        return cls(np.array(pixels, dtype=np.float64))

    @classmethod
    def allocate(cls, width: int, height: int, channels: int, fill_value: float | None = None) -> RasterBackingStore:
        shape = (int(height), int(width), int(channels))
        if fill_value is None:
            return cls(np.empty(shape, dtype=np.float64))
        return cls(np.full(shape, fill_value, dtype=np.float64))

    @classmethod
    def decode(cls, path: Union[str, Path], timeout: int = DECODE_TIMEOUT) -> RasterBackingStore:
        path = Path(path)

        # ─── timeout wrapper (5 s default) ────────────────────────────────
        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        # SIGALRM handlers can only be installed from the main thread
        use_alarm = (
            timeout > 0
            and hasattr(signal, "SIGALRM")
            and threading.current_thread() is threading.main_thread()
        )
        if use_alarm:
            previous = signal.signal(signal.SIGALRM, _handler)
            pending = signal.alarm(timeout)
        try:
            arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        finally:
            if use_alarm:
                signal.alarm(0)  # always disarm
                signal.signal(signal.SIGALRM, previous or signal.SIG_DFL)
                if pending:
                    signal.alarm(pending)
        # ──────────────────────────────────────────────────────────────────

        if arr is not None:
            arr = cls._bgr_to_rgb(arr)
        else:
            logger.debug(f"OpenCV could not decode {path}, trying Pillow")
            arr = cls._read_with_pillow(path)

        if arr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        store = cls.from_array(arr)
        logger.debug(f"Decoded {path}: {store.width}x{store.height}x{store.channels}")
        return store

    @staticmethod
    def _bgr_to_rgb(arr: np.ndarray) -> np.ndarray:
        # OpenCV hands back BGR / BGRA
        if arr.ndim == 3 and arr.shape[2] >= 3:
            order = [2, 1, 0] + list(range(3, arr.shape[2]))
            return arr[:, :, order]
        return arr

    @staticmethod
    def _read_with_pillow(path: Path) -> np.ndarray | None:
        try:
            with PILImage.open(path) as img:
                if img.mode == "P":
                    img = img.convert("RGBA" if "transparency" in img.info else "RGB")
                return np.asarray(img)
        except (OSError, ValueError) as err:
            logger.debug(f"Pillow could not decode {path}: {err}")
            return None

    # ─── shape ───────────────────────────────────────────────────────
    @property
    def shape(self) -> tuple[int, int, int]:
        return self._pixels.shape

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def channels(self) -> int:
        return self._pixels.shape[2]

    @property
    def empty(self) -> bool:
        return self._pixels.size == 0

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, C) view of the buffer."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    # ─── indexed access ──────────────────────────────────────────────
    def read(self, x: int, y: int, channel: int) -> float:
        return float(self._pixels[y, x, channel])

    def write(self, x: int, y: int, channel: int, value: float) -> None:
        self._pixels[y, x, channel] = value

    def __getitem__(self, key):
        x, y, channel = key
        return self.read(x, y, channel)

    def __setitem__(self, key, value):
        x, y, channel = key
        self.write(x, y, channel, value)

    # ─── ownership ───────────────────────────────────────────────────
    def move_to(self, other: RasterBackingStore) -> RasterBackingStore:
        """
        Hand the buffer over to `other` and leave this store empty.
        Returns `other`, now the sole owner.
        """
        if other is self:
            return other
        other._pixels = self._pixels
        self._pixels = np.empty((0, 0, 0), dtype=np.float64)
        return other

    def copy(self) -> RasterBackingStore:
        return RasterBackingStore(self._pixels.copy())

    def __eq__(self, other):
        if not isinstance(other, RasterBackingStore):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._pixels, other._pixels)

    __hash__ = None

    def __repr__(self):
        return f"RasterBackingStore(shape={self.shape})"
