"""Data classes for the vocabulary and scheduling domain model."""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

SCHEMA_VERSION = 2
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3


class Level(str, Enum):
    BEGINNER = "A2"
    INTERMEDIATE = "B1"
    ADVANCED = "B2"


class Category(str, Enum):
    WORD = "word"
    PHRASE = "phrase"
    EXPRESSION = "expression"


class Gender(str, Enum):
    MASCULINE = "m"
    FEMININE = "f"
    NONE = "none"


class Collection(str, Enum):
    GREETINGS = "greetings"
    DAILY_ROUTINES = "daily-routines"
    DAILY_EXPRESSIONS = "daily-expressions"
    FOOD = "food"
    BEAUTY = "beauty"
    TRAVEL = "travel"
    NATURE = "nature"
    CONJUNCTIONS = "conjunctions"
    TIME = "time"
    SHOPPING = "shopping"
    EMOTIONS = "emotions"
    FAMILY = "family"
    WORK = "work"
    HEALTH = "health"
    WEATHER = "weather"
    GENERAL = "general"


@dataclass(frozen=True)
class VocabularyItem:
    id: str
    french: str
    english: str
    example_fr: str
    example_en: str
    level: Level
    category: Category
    gender: Gender = Gender.NONE
    collection: Collection = Collection.GENERAL


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


def truncate_to_millis(moment: datetime) -> datetime:
    """Drop sub-millisecond precision, which the stored format cannot hold."""
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def utc_now(now: datetime | None = None) -> datetime:
    return truncate_to_millis(now or datetime.now(timezone.utc))


def to_millis(moment: datetime) -> int:
    return (moment - _EPOCH) // _MILLISECOND


def from_millis(millis: int | float) -> datetime:
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError as e:
        raise ValueError(f"timestamp out of range: {millis!r}") from e


@dataclass
class ReviewState:
    """Scheduler state for one learner and one vocabulary item."""
    next_review_due_at: datetime
    last_reviewed_at: datetime
    repetition: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval_days: int = 0
    is_new: bool = True
    forgot_count: int = 0
    marked_very_familiar: bool = False

    @classmethod
    def fresh(cls, now: datetime) -> "ReviewState":
        """State of an item nobody has reviewed yet: new and due now."""
        return cls(next_review_due_at=now, last_reviewed_at=now)

    def copy(self, **changes) -> "ReviewState":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "version": SCHEMA_VERSION,
            "repetition": self.repetition,
            "easeFactor": self.ease_factor,
            "intervalDays": self.interval_days,
            "nextReviewDue": to_millis(self.next_review_due_at),
            "isNew": self.is_new,
            "forgotCount": self.forgot_count,
            "lastReviewed": to_millis(self.last_reviewed_at),
            "veryFamiliar": self.marked_very_familiar,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewState":
        """Decode a version-2 entry. Legacy entries go through migration.upgrade."""
        return cls(
            repetition=max(0, int(data.get("repetition", 0))),
            ease_factor=max(MIN_EASE_FACTOR, float(data.get("easeFactor", DEFAULT_EASE_FACTOR))),
            interval_days=max(0, int(data["intervalDays"])),
            next_review_due_at=from_millis(data.get("nextReviewDue", 0)),
            is_new=bool(data.get("isNew", False)),
            forgot_count=max(0, int(data.get("forgotCount", 0))),
            last_reviewed_at=from_millis(data.get("lastReviewed", 0)),
            marked_very_familiar=bool(data.get("veryFamiliar", False)),
        )


ProgressMap = dict[str, ReviewState]


@dataclass
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastCompletedDate": self.last_completed_date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StreakState":
        return cls(
            current_streak=max(0, int(data.get("currentStreak", 0))),
            longest_streak=max(0, int(data.get("longestStreak", 0))),
            last_completed_date=data.get("lastCompletedDate"),
        )


@dataclass
class CollectionCount:
    collection: Collection
    name: str
    count: int


@dataclass
class ForgotEntry:
    item: VocabularyItem
    forgot_count: int


@dataclass
class LearningStats:
    total: int
    learned: int
    due: int
    new: int
    mastery_percentage: int = 0
