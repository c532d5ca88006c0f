from .errors import DomainError, FormatError, InvalidArgumentError, RasterError
from .models.raster_image import RasterImage
from .repositories.backing_store import RasterBackingStore

__all__ = [
    "DomainError",
    "FormatError",
    "InvalidArgumentError",
    "RasterBackingStore",
    "RasterError",
    "RasterImage",
]
