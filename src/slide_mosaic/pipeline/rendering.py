"""
Module: pipeline.rendering

Purpose:
    Document-to-raster collaborators. The composition engine never
    imports these; the controller receives a renderer as an argument.

Key Classes:
    - PageRenderer: Protocol for anything that rasterizes a document
    - PdfRenderer: PyMuPDF page rasterizer
    - OfficeRenderer: LibreOffice to PDF conversion, then PdfRenderer
    - RenderError: Raised when a document cannot be rasterized

Key Functions:
    - render_page(): Rasterize one PDF page at a scale factor
    - renderer_for_path(): Pick a renderer from a file suffix

Dependencies:
    - fitz (PyMuPDF): PDF rendering
    - PIL.Image: Pixmap to image conversion
    - subprocess (std): soffice invocation

Used By:
    - pipeline.controller: convert_and_merge
    - cli: Renderer selection
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import List, Protocol, Union

import fitz
from PIL import Image

from slide_mosaic.composition import RasterImage

logger = logging.getLogger(__name__)

PDF_SUFFIXES = frozenset({".pdf"})
OFFICE_SUFFIXES = frozenset({".ppt", ".pptx", ".pps", ".ppsx", ".odp", ".key", ".doc", ".docx", ".odt"})
DEFAULT_SOFFICE = "soffice"
DEFAULT_CONVERT_TIMEOUT_S = 300

# soffice flags for unattended conversion
SOFFICE_FLAGS = (
    "--headless",
    "--invisible",
    "--nocrashreport",
    "--nodefault",
    "--nofirststartwizard",
    "--nolockcheck",
    "--nologo",
    "--norestore",
)


class RenderError(Exception):
    """Document could not be rasterized."""
    pass


class PageRenderer(Protocol):
    """Anything that turns a document into ordered page rasters."""

    def render(self, path: Path, scale: float) -> List[RasterImage]:
        ...


def render_page(page: fitz.Page, scale: float) -> RasterImage:
    """
    Rasterize a full PDF page.

    Args:
        page: PyMuPDF page object.
        scale: Zoom factor (1.0 = 72 DPI).

    Returns:
        RGBA RasterImage of the page.

    Raises:
        RenderError: If scale is not positive or the page renders empty.

    Example:
        >>> image = render_page(doc[0], scale=2.0)
        >>> image.size
        (1190, 1684)  # A4 at 144 DPI
    """
    if scale <= 0:
        raise RenderError(f"Render scale must be positive: {scale}")

    matrix = fitz.Matrix(scale, scale)
    pix = page.get_pixmap(matrix=matrix, alpha=False)
    if pix.width <= 0 or pix.height <= 0:
        raise RenderError(f"Page rendered to an empty pixmap ({pix.width}x{pix.height})")

    image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    return RasterImage.from_pil(image)


class PdfRenderer:
    """
    Rasterize every page of a PDF with PyMuPDF.

    Example:
        >>> pages = PdfRenderer().render(Path("deck.pdf"), scale=2.0)
        >>> len(pages)
        12
    """

    def render(self, path: Path, scale: float) -> List[RasterImage]:
        path = Path(path)
        logger.info(f"Rendering PDF: {path}")
        try:
            doc = fitz.open(path)
        except (RuntimeError, ValueError, OSError) as e:
            raise RenderError(f"Could not open PDF {path}: {e}") from e

        try:
            if doc.page_count == 0:
                raise RenderError(f"PDF has no pages: {path}")
            pages = []
            for page_index in range(doc.page_count):
                try:
                    pages.append(render_page(doc[page_index], scale))
                except RuntimeError as e:
                    raise RenderError(f"Failed to render page {page_index + 1} of {path}: {e}") from e
                logger.debug(f"Rendered page {page_index + 1}/{doc.page_count}")
        finally:
            doc.close()

        logger.info(f"Rendered {len(pages)} pages")
        return pages


class OfficeRenderer:
    """
    Convert an office document to PDF with LibreOffice, then rasterize.

    Args:
        soffice: Path or name of the soffice binary.
        timeout: Seconds allowed for the conversion.
        pdf_renderer: Renderer used on the converted PDF.
    """

    def __init__(
        self,
        soffice: str = DEFAULT_SOFFICE,
        *,
        timeout: float = DEFAULT_CONVERT_TIMEOUT_S,
        pdf_renderer: PageRenderer | None = None,
    ):
        self.soffice = soffice
        self.timeout = timeout
        self.pdf_renderer = pdf_renderer or PdfRenderer()

    def convert_to_pdf(self, path: Path, output_dir: Path) -> Path:
        """
        Run soffice to produce <output_dir>/<stem>.pdf.

        Raises:
            RenderError: If soffice is missing, fails, times out or
                produces no PDF.
        """
        command = [
            self.soffice,
            *SOFFICE_FLAGS,
            "--convert-to",
            "pdf",
            "--outdir",
            str(output_dir),
            str(path),
        ]
        logger.info(f"Converting {path.name} to PDF")
        try:
            subprocess.run(
                command,
                check=True,
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise RenderError(f"LibreOffice binary not found: {self.soffice}") from e
        except subprocess.TimeoutExpired as e:
            raise RenderError(f"PDF conversion timed out after {self.timeout}s: {path}") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode(errors="replace").strip()
            raise RenderError(f"PDF conversion failed for {path}: {stderr}") from e

        pdf_path = output_dir / f"{path.stem}.pdf"
        if not pdf_path.exists():
            raise RenderError(f"LibreOffice produced no PDF for {path}")
        return pdf_path

    def render(self, path: Path, scale: float) -> List[RasterImage]:
        path = Path(path)
        with tempfile.TemporaryDirectory(prefix="slide_mosaic_") as tmp:
            pdf_path = self.convert_to_pdf(path, Path(tmp))
            return self.pdf_renderer.render(pdf_path, scale)


def renderer_for_path(
    path: Union[str, Path],
    *,
    soffice: str = DEFAULT_SOFFICE,
) -> PageRenderer:
    """
    Choose a renderer by file suffix.

    Raises:
        RenderError: If the suffix is not a supported document type.

    Example:
        >>> type(renderer_for_path("deck.pptx")).__name__
        'OfficeRenderer'
    """
    suffix = Path(path).suffix.lower()
    if suffix in PDF_SUFFIXES:
        return PdfRenderer()
    if suffix in OFFICE_SUFFIXES:
        return OfficeRenderer(soffice)
    raise RenderError(f"Unsupported document type: {suffix or '(no suffix)'}")
