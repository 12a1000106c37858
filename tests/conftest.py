"""Pytest configuration and fixtures."""

import io

import pytest
from python_multipart.multipart import MultipartParser, parse_options_header

from formpost.boundary import BoundaryGenerator
from formpost.models import Response


class FakeSocket:
    """
    Socket stand-in that replays a canned response and records what was sent.

    When `error` is given it is raised by `recv` once the canned bytes run out,
    instead of signalling EOF.
    """

    def __init__(self, response: bytes, error: Exception | None = None) -> None:
        self._incoming = io.BytesIO(response)
        self.error = error
        self.sent = bytearray()
        self.timeout = None
        self.closed = False

    def settimeout(self, timeout):
        self.timeout = timeout

    def sendall(self, data):
        self.sent.extend(data)

    def recv(self, n):
        data = self._incoming.read(n)
        if not data and self.error is not None:
            raise self.error
        return data

    def close(self):
        self.closed = True


class RecordingTransport:
    """Transport that keeps every call and answers with fixed bytes."""

    def __init__(self, response: bytes = b"ok") -> None:
        self.response = response
        self.calls = []

    def send(self, address, method, body, content_type):
        self.calls.append((address, method, body, content_type))
        return self.response


def fixed_generator(*values):
    """BoundaryGenerator drawing from a fixed sequence of ints."""
    return BoundaryGenerator(iter(values).__next__)


def split_parts(body: bytes, boundary: bytes) -> list[tuple[dict[bytes, bytes], bytes]]:
    """Run python-multipart over `body`; return (headers, data) per completed part."""
    parts = []
    current = {}

    def on_part_begin():
        current.update(headers={}, data=bytearray(), field=b"", value=b"")

    def on_header_field(data, start, end):
        current["field"] += data[start:end]

    def on_header_value(data, start, end):
        current["value"] += data[start:end]

    def on_header_end():
        current["headers"][current["field"].lower()] = current["value"]
        current["field"] = current["value"] = b""

    def on_part_data(data, start, end):
        current["data"] += data[start:end]

    def on_part_end():
        parts.append((current["headers"], bytes(current["data"])))

    parser = MultipartParser(
        boundary,
        {
            "on_part_begin": on_part_begin,
            "on_header_field": on_header_field,
            "on_header_value": on_header_value,
            "on_header_end": on_header_end,
            "on_part_data": on_part_data,
            "on_part_end": on_part_end,
        },
    )
    parser.write(body)
    parser.finalize()
    return parts


def parse_form(body: bytes, content_type: str):
    """
    Parse a form body, descending into the nested multipart/mixed files part.

    Returns (fields, files): fields as an ordered list of (name, value),
    files as a list of (name, filename, content_type, content).
    """
    _, options = parse_options_header(content_type)
    fields = []
    files = []
    for headers, data in split_parts(body, options[b"boundary"]):
        ctype, ctype_options = parse_options_header(headers.get(b"content-type"))
        if ctype == b"multipart/mixed":
            # The CRLF before the outer delimiter also ends the last inner delimiter line.
            for file_headers, content in split_parts(data + b"\r\n", ctype_options[b"boundary"]):
                _, params = parse_options_header(file_headers[b"content-disposition"])
                file_ctype, _ = parse_options_header(file_headers[b"content-type"])
                files.append(
                    (
                        params[b"name"].decode("ascii"),
                        params[b"filename"].decode("ascii"),
                        file_ctype.decode("ascii"),
                        content,
                    )
                )
        else:
            _, params = parse_options_header(headers[b"content-disposition"])
            fields.append((params[b"name"].decode("ascii"), data.decode("ascii")))
    return fields, files


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def sample_response():
    """Create a sample Response object."""
    return Response(
        status_code=200,
        reason="OK",
        headers=[
            ("Content-Type", "application/json"),
            ("Content-Length", "13"),
        ],
        body=b'{"key":"val"}',
    )
