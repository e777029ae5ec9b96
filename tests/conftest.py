import pytest
import sys
from pathlib import Path

import numpy as np
from PIL import Image

# Add src to sys.path so we can import slide_mosaic
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from slide_mosaic.composition import RasterImage  # noqa: E402


# Common test fixtures
@pytest.fixture
def solid_image():
    """Factory for single-color RasterImages."""
    def _create(width: int, height: int, color=(200, 30, 30, 255)) -> RasterImage:
        return RasterImage.from_pil(Image.new("RGBA", (width, height), tuple(color)))
    return _create


@pytest.fixture
def patterned_image():
    """Factory for RasterImages whose pixels all differ from a white background."""
    def _create(width: int, height: int, seed: int = 0) -> RasterImage:
        rng = np.random.default_rng(seed)
        arr = rng.integers(0, 200, size=(height, width, 4), dtype=np.uint8)
        arr[..., 3] = 255
        return RasterImage.from_pil(Image.fromarray(arr))
    return _create


@pytest.fixture
def sample_pdf(tmp_path: Path):
    """Create a three-page PDF with distinct page sizes."""
    import fitz

    pdf_path = tmp_path / "sample.pdf"
    doc = fitz.open()
    for width, height in [(200, 100), (200, 150), (100, 100)]:
        page = doc.new_page(width=width, height=height)
        page.draw_rect(fitz.Rect(10, 10, 50, 50), color=(1, 0, 0), fill=(1, 0, 0))
    doc.save(pdf_path)
    doc.close()
    return pdf_path
