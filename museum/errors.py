"""
Error kinds raised by the services and rendered by the HTTP layer.
"""

from __future__ import annotations


class MuseumError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MuseumError):
    status_code = 400


class NotFoundError(MuseumError):
    status_code = 404


class ConflictError(MuseumError):
    status_code = 409


class UpstreamError(MuseumError):
    """No external model produced a usable answer."""

    status_code = 500


class StoreError(MuseumError):
    status_code = 500
