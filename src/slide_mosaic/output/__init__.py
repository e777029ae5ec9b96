"""
Module: output

Purpose:
    Persist merge results as PNG files and optional ZIP archives.

Key Functions:
    - write_result(): Write pages and composites to a directory
    - write_zip(): Bundle written files

Used By:
    - slide_mosaic.cli
"""

from .write_queue import WriteQueue, WriteReport
from .writer import OutputError, WrittenFiles, output_filename, write_result
from .zip_writer import write_zip

__all__ = [
    "WriteQueue",
    "WriteReport",
    "OutputError",
    "WrittenFiles",
    "output_filename",
    "write_result",
    "write_zip",
]
