"""Request middleware."""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
