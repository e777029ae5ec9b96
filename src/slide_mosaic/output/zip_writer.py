"""
Module: output.zip_writer

Purpose:
    Bundle written output files into a single ZIP archive.

Key Functions:
    - write_zip(): Main entry point

Dependencies:
    - zipfile (std)

Used By:
    - cli: --zip option
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

README_NAME = "README.txt"


def write_zip(
    files: Sequence[Path],
    output_path: Path,
    *,
    include_readme: bool = True,
) -> Path:
    """
    Bundle files into a deflated ZIP archive.

    Creates a ZIP file with structure:
        images.zip
        ├── README.txt        # File listing (optional)
        ├── slide-1.png
        ├── ...
        └── merged-1.png

    Args:
        files: Paths to include (stored by file name, in order)
        output_path: Path for .zip file (will append .zip if missing)
        include_readme: Whether to include README.txt

    Returns:
        Path to created ZIP file

    Raises:
        FileNotFoundError: If any input file is missing
        ValueError: If two inputs share a file name
    """
    if output_path.suffix != ".zip":
        output_path = output_path.with_suffix(".zip")

    names = [Path(f).name for f in files]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate file names in archive: {', '.join(duplicates)}")
    for path in files:
        if not Path(path).is_file():
            raise FileNotFoundError(f"Cannot archive missing file: {path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Creating ZIP archive at {output_path}")

    with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as zf:
        if include_readme:
            zf.writestr(README_NAME, _generate_readme(names))
        for path, name in zip(files, names):
            zf.write(path, arcname=name)

    return output_path


def _generate_readme(names: Sequence[str]) -> str:
    """Generate README.txt content."""
    lines = [
        "slide-mosaic - Exported Images",
        "=" * 40,
        "",
        f"Files: {len(names)}",
        "",
    ]
    lines.extend(f"- {name}" for name in names)
    lines.append("")
    return "\n".join(lines)
