"""
External Services Package
"""

from .llm_service import LLMService, LLMProvider, OpenAIProvider, GenerationError

__all__ = [
    "LLMService", "LLMProvider", "OpenAIProvider", "GenerationError"
]
