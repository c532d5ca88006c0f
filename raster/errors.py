class RasterError(Exception):
    """Base class for every error raised by the raster package."""


class FormatError(RasterError, ValueError):
    """A decoded file has a channel layout other than grayscale or RGB."""


class InvalidArgumentError(RasterError, ValueError):
    """Explicit construction asked for an unsupported channel count."""


class DomainError(RasterError, ValueError):
    """An axis, channel or coordinate lies outside the image."""
