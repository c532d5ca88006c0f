from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, List, Iterator
import logging
import os
import numpy as np
from dotenv import load_dotenv

from ..errors import RasterError
from ..models.raster_image import RasterImage
from .backing_store import RasterBackingStore

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_EXTS = ".png,.jpg,.jpeg,.bmp,.tif,.tiff,.pgm,.ppm"


class RasterRepository:
    """
    Handles file I/O for RasterImage entities.
    """
    def __init__(self):
        exts = os.getenv("VALID_IMAGE_EXTENSIONS", DEFAULT_EXTS)
        self.VALID_EXTS = {ext.strip().lower() for ext in exts.split(",") if ext.strip()}

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> RasterImage:
        """Wrap a copy of an (H, W) or (H, W, C) array."""
        img = RasterImage.adopt(RasterBackingStore.from_array(pixels))
        if path is not None:
            img.source_path = str(path)
        return img

    @staticmethod
    def retrieve_image_dimensions(img: RasterImage):
        return img.height, img.width

    @staticmethod
    def load(path: Union[str, Path]) -> RasterImage:
        return RasterImage.from_file(path)

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[RasterImage]:
        """
        Yield RasterImage objects one at a time.  Nothing accumulates in memory.
        Files that cannot be decoded, or are neither gray nor RGB, are skipped.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            if not p.is_file():
                logger.debug(f"Skipping because not file: {p}")
                continue
            try:
                img = self.load(p)
            except (RasterError, FileNotFoundError, TimeoutError) as err:
                logger.warning(f"Skipping {p.name}: {err}")
                continue
            logger.debug(f"Loaded: {p}")
            yield img

    def load_dir(
        self, folder: Union[str, Path], *, recursive=False, exts=None
    ) -> List[RasterImage]:
        """
        Helper that returns a list, but internally streams.
        """
        return list(self.iter_dir(folder, recursive=recursive, exts=exts))
