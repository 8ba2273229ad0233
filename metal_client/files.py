# metal_client/files.py
"""File inputs for uploads.

An upload accepts either a path on disk or an in-memory file. Both are
resolved into one ``UploadTarget`` before anything touches the network, so
the type check and the name sanitizing see the same shape regardless of
where the bytes came from.
"""
from __future__ import annotations
import mimetypes
import os
import re
from dataclasses import dataclass
from typing import IO, AsyncIterator, Union

from .exceptions import UnsupportedFileTypeError

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLS = "application/vnd.ms-excel"
CSV = "text/csv"

SUPPORTED_FILE_TYPES: tuple[str, ...] = (PDF, DOCX, XLS, CSV)
INVALID_FILE_TYPE_MESSAGE = "Invalid file type. Supported types are: pdf, docx, xls, csv."

CHUNK_SIZE = 64 * 1024

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")

# Private registry: lookups must not depend on the host's mime.types files.
_mime = mimetypes.MimeTypes()
_mime.add_type(PDF, ".pdf")
_mime.add_type(DOCX, ".docx")
_mime.add_type(XLS, ".xls")
_mime.add_type(CSV, ".csv")


@dataclass(frozen=True)
class InMemoryFile:
    """Bytes already in memory, with the name (and optionally type) to upload them as."""
    name: str
    content: bytes
    type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


FileInput = Union[str, "os.PathLike[str]", InMemoryFile, IO[bytes]]


@dataclass(frozen=True)
class UploadTarget:
    file_name: str
    file_type: str
    file_size: int
    file_bytes: bytes | IO[bytes]

    def body(self) -> bytes | AsyncIterator[bytes]:
        if isinstance(self.file_bytes, bytes):
            return self.file_bytes
        return iter_chunks(self.file_bytes)


def guess_file_type(name: str) -> str:
    file_type, _ = _mime.guess_type(name, strict=False)
    return file_type or ""


def sanitize_filename(name: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("_", name)


def validate_file_type(file_type: str) -> str:
    if file_type not in SUPPORTED_FILE_TYPES:
        raise UnsupportedFileTypeError(file_type, SUPPORTED_FILE_TYPES, INVALID_FILE_TYPE_MESSAGE)
    return file_type


def _stream_size(fobj: IO[bytes]) -> int:
    pos = fobj.tell()
    try:
        fobj.seek(0, os.SEEK_END)
        return fobj.tell() - pos
    finally:
        fobj.seek(pos)


def resolve_file(file: FileInput) -> UploadTarget:
    """Turn any supported file input into an ``UploadTarget``.

    Paths are stat'ed and read here (blocking). A missing path raises the
    ``FileNotFoundError`` from the filesystem call as-is.
    """
    if isinstance(file, (str, os.PathLike)):
        path = os.fspath(file)
        size = os.stat(path).st_size
        with open(path, "rb") as fh:
            data = fh.read()
        name = os.path.basename(path)
        return UploadTarget(name, guess_file_type(name), size, data)

    if isinstance(file, InMemoryFile):
        return UploadTarget(file.name, file.type or guess_file_type(file.name), file.size, file.content)

    raw_name = getattr(file, "name", None)
    if not isinstance(raw_name, str) or not raw_name:
        raise TypeError("in-memory files need a 'name' to upload under")
    name = os.path.basename(raw_name)
    declared_type = getattr(file, "type", None) or getattr(file, "content_type", None)
    size = getattr(file, "size", None)
    if not isinstance(size, int):
        size = _stream_size(file)
    return UploadTarget(name, declared_type or guess_file_type(name), size, file)


async def iter_chunks(fobj: IO[bytes], chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    while True:
        chunk = fobj.read(chunk_size)
        if not chunk:
            break
        yield chunk
