"""
Module: composition.models

Purpose:
    Value types shared by the canvas and both composers.

Key Classes:
    - Color: Opaque RGBA background fill
    - RasterImage: Immutable RGBA raster (wraps a private Pillow image)
    - Placement: Raster positioned on a canvas

Dependencies:
    - PIL: Pixel storage and conversion
    - numpy: Array view of pixels

Used By:
    - composition.canvas: Placement target and output
    - composition.grid / composition.strip: Inputs and outputs
    - pipeline.rendering: Produces RasterImages from documents
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
from PIL import Image

from .errors import CodecFailureError, InvalidArgumentError

RGBA_MODE = "RGBA"
BYTES_PER_PIXEL = 4


@dataclass(frozen=True)
class Color:
    """
    RGBA color used to fill canvases and pad resized cells.

    Attributes:
        r, g, b: Channel values 0-255
        a: Alpha 0-255 (defaults to opaque)

    Example:
        >>> Color.parse("#ff0000")
        Color(r=255, g=0, b=0, a=255)
        >>> Color.parse("0, 128, 255").as_tuple()
        (0, 128, 255, 255)
    """

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 255:
                raise InvalidArgumentError(f"Color channel {name} must be an int in 0-255: {value!r}")

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @classmethod
    def parse(cls, value: Union["Color", str, Sequence[int]]) -> "Color":
        """
        Parse a hex string, "r,g,b[,a]" string or 3/4-tuple.

        Raises:
            InvalidArgumentError: If the value cannot be interpreted.
        """
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.startswith("#"):
                return cls._from_hex(text[1:])
            parts = [p.strip() for p in text.split(",")]
            try:
                channels = [int(p) for p in parts]
            except ValueError as e:
                raise InvalidArgumentError(f"Invalid color: {value!r}") from e
            return cls._from_channels(channels, value)
        if isinstance(value, (list, tuple)):
            return cls._from_channels(list(value), value)
        raise InvalidArgumentError(f"Invalid color: {value!r}")

    @classmethod
    def _from_hex(cls, digits: str) -> "Color":
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) not in (6, 8):
            raise InvalidArgumentError(f"Invalid hex color: #{digits}")
        try:
            channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid hex color: #{digits}") from e
        return cls(*channels)

    @classmethod
    def _from_channels(cls, channels: list, raw) -> "Color":
        if len(channels) not in (3, 4):
            raise InvalidArgumentError(f"Color needs 3 or 4 channels: {raw!r}")
        return cls(*channels)


WHITE = Color(255, 255, 255)


class RasterImage:
    """
    Immutable RGBA raster.

    Holds a private Pillow image in RGBA mode. Nothing hands out the
    internal image and the constructor copies what it is given: to_pil()
    returns a copy, so callers can never mutate a RasterImage after
    construction.

    Example:
        >>> img = RasterImage.from_pil(Image.new("RGB", (4, 2), "red"))
        >>> img.size
        (4, 2)
        >>> img.getpixel(0, 0)
        (255, 0, 0, 255)
    """

    __slots__ = ("_image",)

    def __init__(self, image: Image.Image):
        _check_raster(image)
        self._image = image.copy()

    @classmethod
    def _adopt(cls, image: Image.Image) -> "RasterImage":
        """Wrap an image nobody else references, without copying."""
        _check_raster(image)
        raster = cls.__new__(cls)
        raster._image = image
        return raster

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """Create from any Pillow image (copied, converted to RGBA)."""
        if image.width <= 0 or image.height <= 0:
            raise InvalidArgumentError(
                f"Image dimensions must be positive: {image.width}x{image.height}"
            )
        try:
            converted = image.convert(RGBA_MODE) if image.mode != RGBA_MODE else image.copy()
        except (OSError, ValueError) as e:
            raise CodecFailureError(f"Could not convert {image.mode} image to RGBA: {e}") from e
        return cls._adopt(converted)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "RasterImage":
        """
        Create from a row-major RGBA buffer.

        Raises:
            InvalidArgumentError: If dimensions are non-positive or the
                buffer length is not width * height * 4.
        """
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Image dimensions must be positive: {width}x{height}")
        expected = width * height * BYTES_PER_PIXEL
        if len(data) != expected:
            raise InvalidArgumentError(
                f"Buffer length {len(data)} does not match {width}x{height} RGBA ({expected})"
            )
        return cls._adopt(Image.frombytes(RGBA_MODE, (width, height), bytes(data)))

    @classmethod
    def solid(cls, width: int, height: int, color: Union[Color, str, Sequence[int]]) -> "RasterImage":
        """Create a raster filled with a single color."""
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Image dimensions must be positive: {width}x{height}")
        return cls._adopt(Image.new(RGBA_MODE, (width, height), Color.parse(color).as_tuple()))

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self._image.size

    def getpixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        return self._image.getpixel((x, y))

    def to_pil(self) -> Image.Image:
        """Return a Pillow copy of the pixels."""
        return self._image.copy()

    def tobytes(self) -> bytes:
        """Row-major RGBA buffer of length width * height * 4."""
        return self._image.tobytes()

    def to_array(self) -> np.ndarray:
        """Pixels as a (height, width, 4) uint8 array."""
        return np.asarray(self._image, dtype=np.uint8).copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.size == other.size and self.tobytes() == other.tobytes()

    def __hash__(self) -> int:
        return hash((self.size, self.tobytes()))

    def __repr__(self) -> str:
        return f"RasterImage({self.width}x{self.height})"


@dataclass(frozen=True)
class Placement:
    """
    A raster positioned on a canvas.

    Attributes:
        image: Raster to copy onto the canvas
        top: Y offset from canvas top (pixels)
        left: X offset from canvas left (pixels)

    Example:
        >>> placement = Placement(image, top=120, left=0)
        >>> placement.bottom
        320  # top + image.height
    """

    image: RasterImage
    top: int
    left: int

    @property
    def bottom(self) -> int:
        """Bottom Y coordinate (exclusive)."""
        return self.top + self.image.height

    @property
    def right(self) -> int:
        """Right X coordinate (exclusive)."""
        return self.left + self.image.width

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) in canvas pixels."""
        return (self.left, self.top, self.right, self.bottom)


def _check_raster(image: Image.Image) -> None:
    if image.mode != RGBA_MODE:
        raise InvalidArgumentError(f"RasterImage requires RGBA, got {image.mode}")
    if image.width <= 0 or image.height <= 0:
        raise InvalidArgumentError(
            f"Image dimensions must be positive: {image.width}x{image.height}"
        )
