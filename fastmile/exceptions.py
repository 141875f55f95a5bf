"""python-fastmile exceptions."""

from __future__ import annotations

from asyncio import TimeoutError as _asyncioTimeoutError
from typing import Any


class FastmileException(Exception):
    """Base exception for library errors."""


class TransportError(FastmileException):
    """Connection exception for gateway communication.

    ``request_sent`` tells whether the request left the client before the
    failure, which matters for calls where the gateway drops the connection
    on purpose, such as a reboot.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.request_sent: bool = kwargs.get("request_sent", False)
        super().__init__(*args)


class TimeoutError(TransportError, _asyncioTimeoutError):
    """Timeout exception for gateway communication."""

    def __repr__(self) -> str:
        return FastmileException.__repr__(self)

    def __str__(self) -> str:
        return FastmileException.__str__(self)


class DecodeError(FastmileException):
    """Response body is not valid json or does not match the expected schema."""


class AuthenticationFailed(FastmileException):
    """The gateway answered the login challenge without a session."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.response: dict | None = kwargs.get("response")
        super().__init__(*args)


class OperationFailed(FastmileException):
    """A control operation reached the gateway and was rejected."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.status_code: int | None = kwargs.get("status_code")
        super().__init__(*args)

    def __str__(self) -> str:
        status = f" (status_code={self.status_code})" if self.status_code else ""
        return super().__str__() + status
