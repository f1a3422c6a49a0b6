"""
意图检测器 - 基于关键词的无状态文本分类
Stateless mood and reflection detectors over free text.
"""
from typing import List, NamedTuple, Tuple


class MoodDetection(NamedTuple):
    score: int
    label: str

    @property
    def detected(self) -> bool:
        return self.score > 0


NO_MOOD = MoodDetection(0, "")

# 按顺序匹配，第一个命中的条目生效
MOOD_PATTERNS: List[Tuple[str, int, str]] = [
    ("amazing", 9, "joyful"),
    ("fantastic", 9, "joyful"),
    ("wonderful", 9, "joyful"),
    ("great", 8, "happy"),
    ("good", 7, "content"),
    ("happy", 8, "happy"),
    ("joyful", 9, "joyful"),
    ("excited", 8, "happy"),
    ("okay", 5, "neutral"),
    ("fine", 6, "content"),
    ("alright", 5, "neutral"),
    ("meh", 4, "low"),
    ("tired", 4, "low"),
    ("stressed", 3, "anxious"),
    ("anxious", 3, "anxious"),
    ("worried", 3, "anxious"),
    ("sad", 3, "sad"),
    ("down", 3, "sad"),
    ("depressed", 2, "very low"),
    ("terrible", 2, "very low"),
    ("awful", 2, "very low"),
    ("horrible", 2, "very low"),
    ("struggling", 3, "struggling"),
]

MOOD_PREFIXES = ("feel ", "feeling ", "i'm ", "i am ")

REFLECTION_INDICATORS = [
    "today i", "i've been thinking", "i realized", "i noticed",
    "looking back", "i feel like", "lately i've", "i've noticed",
    "been feeling", "it's been", "struggling with", "grateful for",
    "thinking about", "i wonder", "reflecting on",
]

REFLECTION_MIN_WORDS = 15


def detect_mood(message: str) -> MoodDetection:
    """检测消息中的情绪表达，未命中时返回 (0, "")"""
    text = message.lower()
    for keyword, score, label in MOOD_PATTERNS:
        if any(prefix + keyword in text for prefix in MOOD_PREFIXES):
            return MoodDetection(score, label)
    return NO_MOOD


def is_reflection(message: str, min_words: int = REFLECTION_MIN_WORDS) -> bool:
    """足够长且包含反思性措辞的消息视为反思"""
    if len(message.split()) < min_words:
        return False
    text = message.lower()
    return any(indicator in text for indicator in REFLECTION_INDICATORS)
