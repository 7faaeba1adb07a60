"""Errors raised by PermissionClient."""

from __future__ import annotations


class PermissionServiceError(Exception):
    """Base class for failed exchanges with the permission service."""


class TransportError(PermissionServiceError):
    """The request never produced a complete response (connection, timeout)."""

    def __init__(self, url: str, cause: Exception) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Could not reach permission service at {url}: {cause}")
        self.__cause__ = cause


class RequestFailedError(PermissionServiceError):
    """The service answered with a non-success status."""

    def __init__(self, status: int, body: str, reason: str = "") -> None:
        self.status = status
        self.body = body
        self.reason = reason
        msg = f"Request failed with {status}"
        if reason:
            msg += f" {reason}"
        super().__init__(msg)


class MalformedResponseError(PermissionServiceError):
    """The response did not cover every submitted request id."""

    def __init__(self, missing_ids: list[str] | None = None) -> None:
        self.missing_ids = list(missing_ids or [])
        super().__init__("Unexpected response from permission service")
