class FormPostError(Exception):
    """Base error for formpost."""


class ConnectionError(FormPostError):
    """Raised when a TCP/TLS connection fails or the request cannot be sent."""


class TLSNegotiationError(ConnectionError):
    """Raised when the TLS handshake fails."""


class ProtocolError(FormPostError):
    """Raised when the server response is not valid HTTP/1.1."""


class HTTPError(FormPostError):
    """Raised when the server answers the upload with an error status."""

    def __init__(self, message: str, response=None) -> None:
        super().__init__(message)
        self.response = response
