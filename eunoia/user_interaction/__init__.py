"""
User Interaction Layer Package
"""

from .app import app
from .a2a_handler import A2AMessageHandler

__all__ = ["app", "A2AMessageHandler"]
