"""
Database Models for Eunoia Agent Service
"""
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime, timezone
from enum import Enum
import uuid


Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class User(Base):
    """用户表 - 每个平台用户ID对应一条记录"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    platform_user_id = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    # 关系
    messages = relationship("ConversationMessage", back_populates="user")
    check_ins = relationship("EmotionalCheckIn", back_populates="user")
    reflections = relationship("Reflection", back_populates="user")


class ConversationMessage(Base):
    """会话消息表 - 只追加，不修改不删除"""
    __tablename__ = "conversation_history"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    message_role = Column(String(20), nullable=False)
    message_content = Column(Text, nullable=False)
    # A2A请求中的messageId，用于关联
    message_id = Column(String(255), nullable=True)
    # 生成回复时使用的用户上下文快照
    context_data = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)

    user = relationship("User", back_populates="messages")


class EmotionalCheckIn(Base):
    """情绪打卡表"""
    __tablename__ = "emotional_checkins"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    mood_score = Column(Integer, nullable=False)
    mood_label = Column(String(50), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    check_in_date = Column(DateTime(timezone=True), default=utc_now, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    user = relationship("User", back_populates="check_ins")


class Reflection(Base):
    """反思记录表"""
    __tablename__ = "reflections"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    sentiment = Column(String(50), nullable=False, default="")
    key_themes = Column(Text, nullable=False, default="")
    ai_analysis = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    user = relationship("User", back_populates="reflections")
