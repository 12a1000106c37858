from __future__ import annotations

import re
import socket
import ssl
from collections.abc import Iterable

from .errors import ConnectionError, ProtocolError, TLSNegotiationError
from .models import Response

STATUS_LINE = re.compile(rb"HTTP/(\d\.\d) (\d{3})(?: (.*))?")


class Connection:
    """
    One TCP/TLS connection that carries a single buffered upload and reads
    back the server's answer.

    Anything short of a complete response is an error: socket failures
    (timeouts included) raise ConnectionError, and a peer that closes
    before the status line, headers or a length-delimited body are done
    raises ProtocolError. Only a response without any framing is read
    until the server closes.
    """

    RECV_SIZE = 4096

    def __init__(
        self,
        host: str,
        port: int,
        scheme: str,
        timeout: float = 10.0,
        verify: bool = True,
    ) -> None:
        self.host = host
        self.port = port
        self.scheme = scheme
        self.timeout = timeout
        self.verify = verify
        self.sock: socket.socket | ssl.SSLSocket | None = None
        self._buffer = bytearray()

    @property
    def closed(self) -> bool:
        return self.sock is None

    def connect(self) -> None:
        try:
            raw = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as exc:
            raise ConnectionError(f"TCP connection to {self.host}:{self.port} failed: {exc}") from exc

        sock = self._wrap_tls(raw) if self.scheme == "https" else raw
        sock.settimeout(self.timeout)
        self.sock = sock

    def _wrap_tls(self, raw: socket.socket) -> ssl.SSLSocket:
        context = ssl.create_default_context()
        if not self.verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        try:
            return context.wrap_socket(raw, server_hostname=self.host)
        except ssl.SSLError as exc:
            raw.close()
            raise TLSNegotiationError(f"TLS handshake with {self.host} failed: {exc}") from exc
        except OSError as exc:
            raw.close()
            raise ConnectionError(f"TLS handshake with {self.host} failed: {exc}") from exc

    def upload(
        self,
        method: str,
        target: str,
        headers: Iterable[tuple[str, str]],
        body: bytes,
    ) -> Response:
        """Send the request head and body in one write, then read the response."""
        if self.sock is None:
            self.connect()
        assert self.sock is not None

        head = [f"{method} {target} HTTP/1.1"]
        head.extend(f"{name}: {value}" for name, value in headers)
        request = ("\r\n".join(head) + "\r\n\r\n").encode("latin-1") + body
        try:
            self.sock.sendall(request)
        except OSError as exc:
            self.close()
            raise ConnectionError(f"Send failed: {exc}") from exc

        return self._read_response()

    def _recv(self) -> bytes:
        assert self.sock is not None
        try:
            return self.sock.recv(self.RECV_SIZE)
        except OSError as exc:
            self.close()
            raise ConnectionError(f"Receive failed: {exc}") from exc

    def _fill(self) -> bool:
        """Append one read to the buffer; False once the peer has closed."""
        chunk = self._recv()
        self._buffer += chunk
        return bool(chunk)

    def _read_line(self, what: str) -> bytes:
        while True:
            end = self._buffer.find(b"\r\n")
            if end >= 0:
                line = bytes(self._buffer[:end])
                del self._buffer[: end + 2]
                return line
            if not self._fill():
                raise ProtocolError(f"Connection closed while reading {what}")

    def _read_exact(self, n: int, what: str) -> bytes:
        while len(self._buffer) < n:
            if not self._fill():
                raise ProtocolError(
                    f"Connection closed while reading {what} ({len(self._buffer)} of {n} bytes)"
                )
        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        return data

    def _read_to_close(self) -> bytes:
        while self._fill():
            pass
        data = bytes(self._buffer)
        self._buffer.clear()
        return data

    def _read_chunked(self) -> bytes:
        chunks: list[bytes] = []
        while True:
            size_line = self._read_line("chunk size")
            try:
                size = int(size_line.split(b";", 1)[0], 16)
            except ValueError as exc:
                raise ProtocolError(f"Invalid chunk size line: {size_line!r}") from exc
            if size < 0:
                raise ProtocolError(f"Invalid chunk size line: {size_line!r}")
            if size == 0:
                break
            chunks.append(self._read_exact(size, "chunk"))
            if self._read_exact(2, "chunk") != b"\r\n":
                raise ProtocolError("Chunk data not followed by CRLF")
        # Trailer section ends with an empty line.
        while self._read_line("chunked trailer"):
            pass
        return b"".join(chunks)

    def _read_response(self) -> Response:
        status_line = self._read_line("status line")
        match = STATUS_LINE.fullmatch(status_line)
        if match is None:
            raise ProtocolError(f"Malformed status line: {status_line!r}")
        version, code, reason = match.groups()

        headers: list[tuple[str, str]] = []
        while True:
            line = self._read_line("headers")
            if not line:
                break
            name, sep, value = line.partition(b":")
            if not sep or not name.strip():
                raise ProtocolError(f"Malformed header line: {line!r}")
            headers.append((name.decode("latin-1").strip(), value.decode("latin-1").strip()))

        framing = {name.lower(): value for name, value in headers}
        if "chunked" in framing.get("transfer-encoding", "").lower():
            body = self._read_chunked()
        elif "content-length" in framing:
            length = framing["content-length"]
            if not length.isdigit():
                raise ProtocolError(f"Invalid Content-Length: {length!r}")
            body = self._read_exact(int(length), "body")
        else:
            body = self._read_to_close()

        return Response(
            int(code),
            (reason or b"").decode("latin-1"),
            headers,
            body,
            http_version=version.decode("ascii"),
        )

    def close(self) -> None:
        if self.sock is not None:
            try:
                self.sock.close()
            finally:
                self.sock = None

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
