from __future__ import annotations

import io
from collections.abc import Iterator, Mapping
from typing import BinaryIO

from formpost.boundary import generate_boundary

CRLF = "\r\n"


def _write_text(sink: BinaryIO, text: str) -> None:
    sink.write(text.encode("ascii"))


class MimePart:
    """
    Base class for everything that can be written into a multipart body.

    A part does not choose its boundary. The envelope that owns it stamps
    `boundary` when the part is added, or passes one to `copy_to` at
    render time, which takes precedence.
    """

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self.boundary: str | None = None

    @property
    def content_disposition(self) -> str:
        raise NotImplementedError

    @property
    def content_type(self) -> str:
        raise NotImplementedError

    def copy_to(self, sink: BinaryIO, boundary: str | None = None) -> None:
        raise NotImplementedError

    def render(self, boundary: str | None = None) -> bytes:
        buf = io.BytesIO()
        self.copy_to(buf, boundary)
        return buf.getvalue()

    def _resolve_boundary(self, boundary: str | None) -> str:
        boundary = boundary if boundary is not None else self.boundary
        if boundary is None:
            raise ValueError(f"{type(self).__name__} has no boundary to render with")
        return boundary


class NameValuePart(MimePart):
    """Plain form fields, written in the mapping's iteration order."""

    def __init__(self, name_values: Mapping[str, str]) -> None:
        super().__init__()
        self.name_values = name_values

    @property
    def content_disposition(self) -> str:
        return "form-data"

    @property
    def content_type(self) -> str:
        return ""

    def copy_to(self, sink: BinaryIO, boundary: str | None = None) -> None:
        boundary = self._resolve_boundary(boundary)
        lines: list[str] = []
        for key, value in self.name_values.items():
            lines.append(f"--{boundary}{CRLF}")
            lines.append(f'Content-Disposition: form-data; name="{key}";{CRLF}')
            lines.append(CRLF)
            lines.append(f"{value}{CRLF}")
        # Opens whatever comes next; this is not a closing delimiter.
        lines.append(f"--{boundary}{CRLF}")
        _write_text(sink, "".join(lines))


class FilePart(MimePart):
    """
    One file attachment backed by a readable binary stream.

    The stream is consumed once during rendering and is left open; the
    caller owns it.
    """

    CHUNK_SIZE = 1024

    def __init__(
        self,
        stream: BinaryIO,
        name: str | None,
        content_type: str,
        file_name: str | None = None,
    ) -> None:
        super().__init__(name)
        self.stream = stream
        self.file_name = file_name
        self._content_type = content_type

    @property
    def content_disposition(self) -> str:
        return "file"

    @property
    def content_type(self) -> str:
        return f"content-type: {self._content_type}"

    def copy_to(self, sink: BinaryIO, boundary: str | None = None) -> None:
        boundary = self._resolve_boundary(boundary)
        header = f"Content-Disposition: {self.content_disposition}"
        if self.name is not None:
            header += f'; name="{self.name}"'
        if self.file_name is not None:
            header += f'; filename="{self.file_name}"'
        _write_text(sink, f"{header}{CRLF}{self.content_type}{CRLF}{CRLF}")

        while True:
            chunk = self.stream.read(self.CHUNK_SIZE)
            if not chunk:
                break
            sink.write(chunk)

        _write_text(sink, f"{CRLF}--{boundary}{CRLF}")

    def __repr__(self) -> str:
        return f"<FilePart name={self.name!r} filename={self.file_name!r}>"


class FilesCollection(MimePart):
    """
    Nested multipart/mixed envelope holding every file of a form.

    The collection has its own boundary, independent of the form that
    contains it, and always frames its files with it.
    """

    def __init__(self, name: str | None = "", boundary: str | None = None) -> None:
        super().__init__(name)
        if boundary == "":
            raise ValueError("boundary must not be empty")
        self.boundary = boundary if boundary is not None else generate_boundary()
        self.files: list[FilePart] = []

    @property
    def count(self) -> int:
        return len(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[FilePart]:
        return iter(self.files)

    def add(self, part: FilePart) -> None:
        self.files.append(part)

    @property
    def content_disposition(self) -> str:
        return f'form-data; name="{self.name or ""}"'

    @property
    def content_type(self) -> str:
        return f"multipart/mixed; boundary={self.boundary}"

    def copy_to(self, sink: BinaryIO, boundary: str | None = None) -> None:
        # `boundary` belongs to the enclosing form; files use ours.
        inner = self.boundary
        _write_text(
            sink,
            f"Content-Disposition: {self.content_disposition}{CRLF}"
            f"Content-Type: {self.content_type}{CRLF}"
            f"{CRLF}"
            f"--{inner}{CRLF}",
        )
        for part in self.files:
            part.boundary = inner
            part.copy_to(sink, inner)
