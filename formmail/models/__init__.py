"""Request-scoped data models."""

from .contact import ContactSubmission

__all__ = [
    'ContactSubmission',
]
