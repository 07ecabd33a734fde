from __future__ import annotations

from typing import Any


class RoommatchError(Exception):
    """Base class for per-request failures raised by services and storage."""

    status_code = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> dict[str, Any]:
        return {"detail": self.detail}


class NotFoundError(RoommatchError):
    status_code = 404

    def __init__(self, entity: str, detail: str | None = None) -> None:
        super().__init__(detail or f"{entity} not found")
        self.entity = entity

    def to_payload(self) -> dict[str, Any]:
        return {"detail": self.detail, "entity": self.entity}


class ValidationFailure(RoommatchError):
    status_code = 422

    def __init__(self, field: str, detail: str) -> None:
        super().__init__(detail)
        self.field = field

    def to_payload(self) -> dict[str, Any]:
        return {"detail": self.detail, "field": self.field}


class UnauthorizedError(RoommatchError):
    status_code = 401


class DuplicateUsernameError(RoommatchError):
    """Raised by storage when ``create_user`` hits an existing username."""

    def __init__(self, username: str) -> None:
        super().__init__("Username already registered")
        self.username = username
