"""Base exceptions for the domain layer."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all domain level exceptions."""


class NotFoundError(DomainError):
    """Raised when an entity cannot be located."""


class ValidationError(DomainError):
    """Raised when data fails domain validation rules."""


class UnsupportedMediaError(ValidationError):
    """Raised when an attachment is neither a recognised image nor video."""


class UntrustedUrlError(ValidationError):
    """Raised when a pasted URL is not hosted on an allowed domain."""


class UploadError(DomainError):
    """Raised when a media backend fails to store or resolve a file."""


class StorageError(DomainError):
    """Raised when the gallery store cannot be read or written."""


__all__ = [
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "UnsupportedMediaError",
    "UntrustedUrlError",
    "UploadError",
    "StorageError",
]
