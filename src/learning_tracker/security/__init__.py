"""Identity resolution for incoming requests."""

from .tokens import get_current_owner

__all__ = ["get_current_owner"]
