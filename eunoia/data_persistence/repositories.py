"""
Repository pattern for data access
"""
from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
import logging

from .models import User, ConversationMessage, EmotionalCheckIn, Reflection, utc_now


class UserNotFoundError(LookupError):
    """平台用户不存在"""

    def __init__(self, platform_user_id: str):
        super().__init__(f"user not found: {platform_user_id}")
        self.platform_user_id = platform_user_id


@dataclass
class CheckInStats:
    """情绪打卡统计"""
    average_mood_score: float = 0.0
    total_check_ins: int = 0
    last_check_in: Optional[EmotionalCheckIn] = None
    mood_trend: str = ""


class UserRepository:
    """用户数据访问层"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def create_user(self, platform_user_id: str, username: str = "") -> User:
        user = User(platform_user_id=platform_user_id, username=username)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        self.logger.info(f"User created: {user.id} (platform_user_id={platform_user_id})")
        return user

    def find_by_platform_id(self, platform_user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.platform_user_id == platform_user_id).first()

    def get_user_by_platform_id(self, platform_user_id: str) -> User:
        """按平台用户ID获取用户，不存在时抛出UserNotFoundError"""
        user = self.find_by_platform_id(platform_user_id)
        if user is None:
            self.logger.info(f"User not found: platform_user_id={platform_user_id}")
            raise UserNotFoundError(platform_user_id)
        return user

    def get_or_create_user(self, platform_user_id: str) -> User:
        """获取或创建用户

        并发的首次请求可能同时读到"不存在"，此时依赖 platform_user_id 的唯一约束：
        插入失败后回滚并重新读取已存在的记录。
        """
        user = self.find_by_platform_id(platform_user_id)
        if user is not None:
            return user

        self.logger.info(f"Creating new user for platform_user_id={platform_user_id}")
        try:
            return self.create_user(platform_user_id)
        except IntegrityError:
            self.db.rollback()
            self.logger.warning(f"Concurrent user creation detected for {platform_user_id}, re-reading")
            return self.get_user_by_platform_id(platform_user_id)


class ConversationRepository:
    """会话消息数据访问层"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def save_message(
        self,
        user_id: str,
        role: str,
        content: str,
        message_id: str = None,
        context_data: str = None
    ) -> ConversationMessage:
        message = ConversationMessage(
            user_id=user_id,
            message_role=role,
            message_content=content,
            message_id=message_id,
            context_data=context_data
        )
        try:
            self.db.add(message)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(message)
        return message

    def get_conversation_history(self, user_id: str, limit: int = 50) -> List[ConversationMessage]:
        """获取最近的消息（按时间倒序）"""
        return self.db.query(ConversationMessage).filter(
            ConversationMessage.user_id == user_id
        ).order_by(ConversationMessage.created_at.desc()).limit(limit).all()

    def get_recent_messages(self, user_id: str, minutes: int) -> List[ConversationMessage]:
        """获取最近N分钟内的消息（按时间正序）"""
        since = utc_now() - timedelta(minutes=minutes)
        return self.db.query(ConversationMessage).filter(
            ConversationMessage.user_id == user_id,
            ConversationMessage.created_at >= since
        ).order_by(ConversationMessage.created_at.asc()).all()


class CheckInRepository:
    """情绪打卡数据访问层"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def create_check_in(
        self,
        user_id: str,
        mood_score: int,
        mood_label: str,
        description: str = ""
    ) -> EmotionalCheckIn:
        now = utc_now()
        check_in = EmotionalCheckIn(
            user_id=user_id,
            mood_score=mood_score,
            mood_label=mood_label,
            description=description or "",
            check_in_date=now,
            created_at=now
        )
        try:
            self.db.add(check_in)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(check_in)
        self.logger.info(f"Emotional check-in created: {check_in.id} (score={mood_score})")
        return check_in

    def get_check_ins_by_user_id(self, user_id: str, limit: int = 10) -> List[EmotionalCheckIn]:
        return self.db.query(EmotionalCheckIn).filter(
            EmotionalCheckIn.user_id == user_id
        ).order_by(
            EmotionalCheckIn.check_in_date.desc(),
            EmotionalCheckIn.created_at.desc()
        ).limit(limit).all()

    def get_check_in_stats(self, user_id: str, days: int) -> CheckInStats:
        """统计最近N天的平均情绪分数和打卡次数，并根据最近两次打卡判断趋势"""
        since = utc_now() - timedelta(days=days)
        avg_score, total = self.db.query(
            func.avg(EmotionalCheckIn.mood_score),
            func.count(EmotionalCheckIn.id)
        ).filter(
            EmotionalCheckIn.user_id == user_id,
            EmotionalCheckIn.check_in_date >= since
        ).one()

        stats = CheckInStats(
            average_mood_score=float(avg_score) if avg_score is not None else 0.0,
            total_check_ins=total or 0
        )

        latest = self.get_check_ins_by_user_id(user_id, 2)
        if latest:
            stats.last_check_in = latest[0]
            if len(latest) == 1:
                stats.mood_trend = "new"
            elif latest[0].mood_score > latest[1].mood_score:
                stats.mood_trend = "improving"
            elif latest[0].mood_score < latest[1].mood_score:
                stats.mood_trend = "declining"
            else:
                stats.mood_trend = "stable"

        return stats

    def get_today_check_in(self, user_id: str) -> Optional[EmotionalCheckIn]:
        """获取今天(UTC)最新的一次打卡"""
        start_of_day = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        return self.db.query(EmotionalCheckIn).filter(
            EmotionalCheckIn.user_id == user_id,
            EmotionalCheckIn.check_in_date >= start_of_day
        ).order_by(EmotionalCheckIn.created_at.desc()).first()


class ReflectionRepository:
    """反思记录数据访问层"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def create_reflection(
        self,
        user_id: str,
        content: str,
        sentiment: str = "",
        key_themes: str = "",
        ai_analysis: str = ""
    ) -> Reflection:
        reflection = Reflection(
            user_id=user_id,
            content=content,
            sentiment=sentiment,
            key_themes=key_themes,
            ai_analysis=ai_analysis
        )
        try:
            self.db.add(reflection)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(reflection)
        self.logger.info(f"Reflection created: {reflection.id}")
        return reflection

    def get_reflections_by_user_id(self, user_id: str, limit: int = 10) -> List[Reflection]:
        return self.db.query(Reflection).filter(
            Reflection.user_id == user_id
        ).order_by(Reflection.created_at.desc()).limit(limit).all()

    def get_recent_reflections(self, user_id: str, days: int) -> List[Reflection]:
        since = utc_now() - timedelta(days=days)
        return self.db.query(Reflection).filter(
            Reflection.user_id == user_id,
            Reflection.created_at >= since
        ).order_by(Reflection.created_at.desc()).all()
