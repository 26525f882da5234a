"""Request context module."""

from .models import RequestContext

__all__ = ["RequestContext"]
