"""
Data Persistence Layer Package
"""

# 数据库管理
from .database import DatabaseManager, get_db, create_tables, build_engine

# 数据模型
from .models import (
    Base, User, ConversationMessage, EmotionalCheckIn, Reflection, MessageRole
)

# Repository层
from .repositories import (
    UserRepository, ConversationRepository, CheckInRepository,
    ReflectionRepository, CheckInStats, UserNotFoundError
)

__all__ = [
    # 数据库工具
    "DatabaseManager", "get_db", "create_tables", "build_engine",
    # 数据模型
    "Base", "User", "ConversationMessage", "EmotionalCheckIn", "Reflection", "MessageRole",
    # Repository层
    "UserRepository", "ConversationRepository", "CheckInRepository",
    "ReflectionRepository", "CheckInStats", "UserNotFoundError"
]
