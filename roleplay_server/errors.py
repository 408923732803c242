# Copyright (C) 2024 Roleplay Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Application errors rendered as {"code", "status", "message"} bodies."""

from fastapi import status as http_status


class AppError(Exception):
    """Base for errors a caller can act on. Rendered by the handler in main."""

    code = "BAD_REQUEST"
    status = http_status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def to_dict(self) -> dict:
        return {"code": self.code, "status": self.status, "message": self.message}


class ValidationFailed(AppError):
    status = 422


class Conflict(AppError):
    status = http_status.HTTP_409_CONFLICT


class InvalidOperation(AppError):
    """Action not allowed in the current state (400 unless a status is given)."""


class NotFound(AppError):
    status = http_status.HTTP_404_NOT_FOUND


class Forbidden(AppError):
    status = http_status.HTTP_403_FORBIDDEN


class TokenExpired(AppError):
    code = "TOKEN_EXPIRED"
    status = http_status.HTTP_410_GONE
