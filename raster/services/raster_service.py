from __future__ import annotations
from pathlib import Path
from typing import Iterable, Union, Iterator
import logging
import numpy as np

from ..models.raster_image import RasterImage
from ..repositories.backing_store import RasterBackingStore
from ..repositories.raster_repository import RasterRepository

logger = logging.getLogger(__name__)


class RasterService:
    """Business-level helpers on top of RasterImage.  No file-format logic."""
    def __init__(self):
        self.raster_repository = RasterRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> RasterImage:
        return self.raster_repository.create_image(pixels, path)

    def load(self, path: Union[str, Path]) -> RasterImage:
        """Load a single image from disk into a RasterImage object."""
        return self.raster_repository.load(path)

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[RasterImage]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.raster_repository.iter_dir(folder,
                                               recursive=recursive,
                                               exts=exts)

    def get_image_dimensions(self, img: RasterImage):
        return self.raster_repository.retrieve_image_dimensions(img)

    @staticmethod
    def to_grayscale(img: RasterImage) -> RasterImage:
        return img.to_grayscale()

    @staticmethod
    def mean_intensity(img: RasterImage) -> float:
        """
        Args:
            img (RasterImage): An image object

        Returns:
            (float): The mean of its grayscale version.
        """
        return float(img.to_grayscale().pixels.mean())

    @staticmethod
    def resample_rows(img: RasterImage, new_width: int) -> RasterImage:
        """
        Horizontal resampling pass: stretch or shrink every row to `new_width`
        samples, keeping the first and last columns aligned. Rows and channels
        are untouched. Returns a *new* image.
        """
        if new_width <= 0:
            raise ValueError(f"Invalid target width {new_width}")

        out = RasterBackingStore.allocate(new_width, img.height, img.channels)
        span = img.width - 1
        for h in range(img.height):
            for x in range(new_width):
                wx = x * span / (new_width - 1) if new_width > 1 else 0.0
                for c in range(img.channels):
                    out.write(x, h, c, img.at_h(wx, h, c))

        logger.debug(f"Resampled rows {img.width} -> {new_width} ({img.height} rows)")
        resampled = RasterImage.adopt(out)
        resampled.source_path = img.source_path
        return resampled
