from __future__ import annotations

import io
from collections.abc import Mapping
from typing import TYPE_CHECKING, BinaryIO

from formpost.boundary import BoundaryGenerator, default_generator
from formpost.parts import FilePart, FilesCollection, NameValuePart

if TYPE_CHECKING:
    from formpost.transport import Transport


class MultipartBuilder:
    """
    Collects form fields and files and serializes them into one
    multipart/form-data body.

    Fields are written first, in the order they were added. Files are
    grouped into a single nested multipart/mixed envelope written after
    the fields.

    Args:
        boundary: Outer boundary. Generated when omitted.
        files_name: Value of the ``name=`` parameter of the files envelope.
        boundary_generator: Source of the outer and envelope boundaries.

    Example:
        with open("report.pdf", "rb") as fh:
            builder = MultipartBuilder()
            builder.add_field("title", "Q3")
            builder.add_file(fh, "report", "application/pdf", "report.pdf")
            body = builder.upload(HTTPTransport(), "https://example.com/upload")
    """

    def __init__(
        self,
        boundary: str | None = None,
        files_name: str = "",
        boundary_generator: BoundaryGenerator | None = None,
    ) -> None:
        if boundary == "":
            raise ValueError("boundary must not be empty")
        self.boundary_generator = boundary_generator or default_generator
        self._boundary = boundary if boundary is not None else self.boundary_generator.generate()
        self.files_name = files_name
        self._fields: list[NameValuePart] = []
        self._files: FilesCollection | None = None
        self._built = False

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self._boundary}"

    @property
    def fields(self) -> list[NameValuePart]:
        return list(self._fields)

    @property
    def files(self) -> FilesCollection | None:
        return self._files

    def add(self, part: NameValuePart | FilePart) -> MultipartBuilder:
        if self._built:
            raise RuntimeError("Cannot add parts to a MultipartBuilder that has been built")
        if isinstance(part, NameValuePart):
            part.boundary = self._boundary
            self._fields.append(part)
        elif isinstance(part, FilePart):
            if self._files is None:
                self._files = FilesCollection(
                    self.files_name, boundary=self.boundary_generator.generate()
                )
            self._files.add(part)
        else:
            raise TypeError(f"Unsupported part type: {type(part).__name__}")
        return self

    def add_field(self, name: str, value: str) -> MultipartBuilder:
        return self.add(NameValuePart({name: value}))

    def add_fields(self, name_values: Mapping[str, str]) -> MultipartBuilder:
        return self.add(NameValuePart(name_values))

    def add_file(
        self,
        stream: BinaryIO,
        name: str | None,
        content_type: str = "application/octet-stream",
        file_name: str | None = None,
    ) -> FilePart:
        part = FilePart(stream, name, content_type, file_name)
        self.add(part)
        return part

    def build(self) -> bytes:
        """
        Serialize every part into a fresh buffer and return its bytes.

        File streams are consumed here, so a builder is built exactly once;
        a second call raises RuntimeError. An empty builder yields ``b""``.
        """
        if self._built:
            raise RuntimeError("MultipartBuilder has already been built")
        self._built = True
        buf = io.BytesIO()
        for part in self._fields:
            part.copy_to(buf, self._boundary)

        if self._files is not None and self._files.count > 0:
            if not self._fields:
                # Without a preceding field nothing opens the envelope.
                buf.write(f"--{self._boundary}\r\n".encode("ascii"))
            self._files.copy_to(buf, self._boundary)
            buf.write(f"--{self._boundary}\r\n".encode("ascii"))

        buf.seek(0)
        return buf.read()

    def upload(self, transport: Transport, address: str, method: str = "POST") -> bytes:
        """
        Build the body and hand it to ``transport``.

        Returns the response bytes. Build and transport failures propagate
        unchanged; nothing is sent when the build fails.
        """
        body = self.build()
        return transport.send(address, method, body, self.content_type)
