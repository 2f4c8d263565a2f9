"""Speaking-time estimate for a script."""

from dataclasses import dataclass

WORDS_PER_MINUTE = 130
TARGET_MINUTES = 2
# Scripts this far over the target get flagged
OVER_LIMIT_TOLERANCE = 0.2


@dataclass
class SpeakingTime:
    words: int
    minutes: float
    over_limit: bool

    @property
    def label(self) -> str:
        return f"{self.words} words · ~{self.minutes:.1f} min"

    def to_dict(self) -> dict:
        return {
            "words": self.words,
            "minutes": round(self.minutes, 1),
            "over_limit": self.over_limit,
            "label": self.label,
        }


def estimate_speaking_time(text: str) -> SpeakingTime:
    words = len(text.split())
    minutes = words / WORDS_PER_MINUTE
    return SpeakingTime(
        words=words,
        minutes=minutes,
        over_limit=minutes > TARGET_MINUTES + OVER_LIMIT_TOLERANCE,
    )
