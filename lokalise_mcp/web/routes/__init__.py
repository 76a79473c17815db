"""HTTP route blueprints."""

from .keys import keys_bp

__all__ = ["keys_bp"]
