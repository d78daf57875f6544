"""
Low-level API that locates the binary structures of a document.

Nothing here copies pixel data: sections are described by
:py:class:`~psd_reader.psd.chunks.ChunkRef` ranges into the source buffer.
"""

from .chunks import ChunkRef as ChunkRef, Chunks as Chunks, locate_chunks as locate_chunks
from .header import (
    DocumentInfo as DocumentInfo,
    FileHeader as FileHeader,
    parse_header as parse_header,
)
from .image_resources import ResourceEntry as ResourceEntry, scan_resources as scan_resources

__all__ = [
    "ChunkRef",
    "Chunks",
    "DocumentInfo",
    "FileHeader",
    "ResourceEntry",
    "locate_chunks",
    "parse_header",
    "scan_resources",
]
