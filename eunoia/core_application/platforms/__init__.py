"""
Platform Adapters Package
"""

from .base import Platform, PlatformError
from .telex import TelexPlatform, strip_markup
from .registry import PlatformRegistry, create_default_registry

__all__ = [
    "Platform", "PlatformError",
    "TelexPlatform", "strip_markup",
    "PlatformRegistry", "create_default_registry"
]
