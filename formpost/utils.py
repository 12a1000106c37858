from __future__ import annotations

from typing import NamedTuple
from urllib.parse import urlsplit

DEFAULT_PORTS = {"http": 80, "https": 443}


class Address(NamedTuple):
    """Where an upload goes: connection endpoint plus HTTP request target."""

    scheme: str
    host: str
    port: int
    target: str

    @property
    def host_header(self) -> str:
        if self.port == DEFAULT_PORTS[self.scheme]:
            return self.host
        return f"{self.host}:{self.port}"


def split_address(address: str) -> Address:
    parts = urlsplit(address)
    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise ValueError(f"Unsupported upload scheme {parts.scheme!r}; use http or https")
    if not parts.hostname:
        raise ValueError(f"Upload address has no host: {address!r}")
    target = parts.path or "/"
    if parts.query:
        target += "?" + parts.query
    return Address(scheme, parts.hostname, parts.port or DEFAULT_PORTS[scheme], target)


def sanitize_header(name: str, value: str) -> tuple[str, str]:
    """Strip CR, LF and NUL so caller headers cannot inject extra lines."""
    strip = str.maketrans("", "", "\r\n\x00")
    return name.translate(strip), value.translate(strip)
