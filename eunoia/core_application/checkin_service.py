"""
Emotional Check-in Service
"""
import logging
from typing import List, Optional

from eunoia.data_persistence.models import EmotionalCheckIn
from eunoia.data_persistence.repositories import CheckInRepository, CheckInStats, UserRepository

MIN_MOOD_SCORE = 1
MAX_MOOD_SCORE = 10


class CheckInService:
    """情绪打卡服务"""

    def __init__(
        self,
        check_in_repo: CheckInRepository,
        user_repo: UserRepository,
        logger: Optional[logging.Logger] = None
    ):
        self.check_in_repo = check_in_repo
        self.user_repo = user_repo
        self.logger = logger or logging.getLogger(__name__)

    def create_check_in(
        self,
        platform_user_id: str,
        mood_score: int,
        mood_label: str,
        description: str = ""
    ) -> EmotionalCheckIn:
        self.logger.info(f"Processing check-in for {platform_user_id} (score={mood_score})")

        if not MIN_MOOD_SCORE <= mood_score <= MAX_MOOD_SCORE:
            raise ValueError(f"mood score must be between {MIN_MOOD_SCORE} and {MAX_MOOD_SCORE}")

        user = self.user_repo.get_or_create_user(platform_user_id)
        return self.check_in_repo.create_check_in(
            user_id=user.id,
            mood_score=mood_score,
            mood_label=mood_label,
            description=description
        )

    def get_check_in_history(self, platform_user_id: str, limit: int) -> List[EmotionalCheckIn]:
        user = self.user_repo.get_user_by_platform_id(platform_user_id)
        return self.check_in_repo.get_check_ins_by_user_id(user.id, limit)

    def get_check_in_stats(self, platform_user_id: str, days: int) -> CheckInStats:
        user = self.user_repo.get_user_by_platform_id(platform_user_id)
        return self.check_in_repo.get_check_in_stats(user.id, days)

    def get_today_check_in(self, platform_user_id: str) -> Optional[EmotionalCheckIn]:
        user = self.user_repo.get_user_by_platform_id(platform_user_id)
        return self.check_in_repo.get_today_check_in(user.id)

    @staticmethod
    def generate_mood_insight(stats: CheckInStats) -> str:
        """根据统计结果生成一句情绪洞察"""
        if stats.total_check_ins == 0:
            return "Welcome! Start tracking your emotional wellbeing by sharing how you're feeling today."

        insight = f"Over the past period, your average mood has been {stats.average_mood_score:.1f}/10. "
        trend_messages = {
            "improving": "Your mood is trending upward, which is wonderful to see!",
            "declining": "I notice your mood has been declining. Remember, it's okay to have difficult days.",
            "stable": "Your mood has been stable, which shows consistency.",
            "new": "Keep tracking to see patterns over time.",
        }
        return insight + trend_messages.get(stats.mood_trend, "")
