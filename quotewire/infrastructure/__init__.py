"""Infrastructure layer implementations."""

from quotewire.infrastructure import http, storage

__all__ = ["http", "storage"]
