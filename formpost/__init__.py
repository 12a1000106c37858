from formpost.boundary import BoundaryGenerator, generate_boundary
from formpost.parts import MimePart, NameValuePart, FilePart, FilesCollection
from formpost.builder import MultipartBuilder
from formpost.transport import Transport, HTTPTransport
from formpost.models import Response
from formpost.errors import (
    FormPostError,
    ConnectionError,
    TLSNegotiationError,
    ProtocolError,
    HTTPError,
)

__all__ = [
    "BoundaryGenerator",
    "generate_boundary",
    "MimePart",
    "NameValuePart",
    "FilePart",
    "FilesCollection",
    "MultipartBuilder",
    "Transport",
    "HTTPTransport",
    "Response",
    "FormPostError",
    "ConnectionError",
    "TLSNegotiationError",
    "ProtocolError",
    "HTTPError",
]
