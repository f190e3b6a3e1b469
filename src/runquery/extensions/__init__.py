"""
Extensions module - request lifecycle observers.
"""

from __future__ import annotations

from .base import (
    ExtensionStack,
    GraphQLExtension,
    build_extension_stack,
    enable_extensions,
    extension_middleware,
    extensions_enabled,
)
from .cache_control import CacheControlExtension
from .tracing import TracingExtension

__all__ = [
    "GraphQLExtension",
    "ExtensionStack",
    "build_extension_stack",
    "enable_extensions",
    "extensions_enabled",
    "extension_middleware",
    "TracingExtension",
    "CacheControlExtension",
]
