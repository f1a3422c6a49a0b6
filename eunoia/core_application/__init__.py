"""
Core Application Layer Package

主要组件：
- a2a_protocol: A2A信封、任务结果与JSON-RPC错误码
- platforms: 平台适配器与注册表
- intent_detectors: 情绪与反思意图检测
- ConversationService: 会话编排器
- CheckInService / ReflectionService: 打卡与反思记录
"""

from .conversation_service import ConversationService, build_prompt_history, build_system_prompt
from .checkin_service import CheckInService
from .reflection_service import ReflectionService
from .intent_detectors import detect_mood, is_reflection, MoodDetection
from .platforms import Platform, PlatformError, PlatformRegistry, TelexPlatform, create_default_registry

__all__ = [
    "ConversationService", "build_prompt_history", "build_system_prompt",
    "CheckInService", "ReflectionService",
    "detect_mood", "is_reflection", "MoodDetection",
    "Platform", "PlatformError", "PlatformRegistry", "TelexPlatform", "create_default_registry"
]
