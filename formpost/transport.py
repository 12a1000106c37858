from __future__ import annotations

import logging
from typing import Protocol

from formpost.connection import Connection
from formpost.errors import HTTPError
from formpost.utils import Address, sanitize_header, split_address

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can deliver a finished body and return the response bytes."""

    def send(self, address: str, method: str, body: bytes, content_type: str) -> bytes:
        ...


class HTTPTransport:
    """
    Sends a fully buffered body over one HTTP/1.1 connection per call.

    Args:
        timeout: Socket timeout in seconds
        verify: Whether to verify TLS certificates
        headers: Extra request headers added to every upload
    """

    def __init__(
        self,
        timeout: float = 10.0,
        verify: bool = True,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.timeout = timeout
        self.verify = verify
        self.headers = dict(headers or {})

    def _request_headers(
        self, address: Address, body: bytes, content_type: str
    ) -> list[tuple[str, str]]:
        merged: dict[str, tuple[str, str]] = {}
        for name, value in (
            ("Host", address.host_header),
            ("Content-Type", content_type),
            ("Content-Length", str(len(body))),
            ("Connection", "close"),
            *self.headers.items(),
        ):
            name, value = sanitize_header(name, value)
            merged[name.lower()] = (name, value)
        return list(merged.values())

    def send(self, address: str, method: str, body: bytes, content_type: str) -> bytes:
        target = split_address(address)
        method = method.upper()
        headers = self._request_headers(target, body, content_type)

        logger.debug("%s %s Content-Type: %s (%d bytes)", method, address, content_type, len(body))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Request body:\n%s", body.decode("ascii", errors="replace"))

        with Connection(target.host, target.port, target.scheme, self.timeout, self.verify) as conn:
            response = conn.upload(method, target.target, headers, body)

        logger.debug("Response %d %s (%d bytes)", response.status_code, response.reason, len(response.content))
        if not response.ok:
            raise HTTPError(
                f"{response.status_code} {response.reason} for {method} {address}",
                response=response,
            )
        return response.content
