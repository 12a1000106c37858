from __future__ import annotations

from collections.abc import Iterable


class Response:
    """
    The server's answer to an upload: status line, headers in wire order
    and the body bytes exactly as received.
    """

    def __init__(
        self,
        status_code: int,
        reason: str,
        headers: Iterable[tuple[str, str]],
        body: bytes,
        http_version: str = "1.1",
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.headers: list[tuple[str, str]] = list(headers)
        self.content = body
        self.http_version = http_version

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive lookup; a repeated header returns its last value."""
        found = default
        for key, value in self.headers:
            if key.lower() == name.lower():
                found = value
        return found

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}] {len(self.content)} bytes>"
