"""Shared protocol definitions."""

from typing import Any, Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_incoming(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: Any,
    ) -> None: ...
    def log_forward(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | None,
    ) -> None: ...
    def log_response(self, method: str, url: str, status: int, message: str) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
