"""
Configuration Package
"""

from .settings import Settings, settings
from .agent_config import AgentConfig, agent_config
from .agent_card_manager import AgentCardManager, get_agent_card_manager

__all__ = [
    "Settings", "settings",
    "AgentConfig", "agent_config",
    "AgentCardManager", "get_agent_card_manager"
]
