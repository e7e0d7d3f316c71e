from dataclasses import dataclass, field, fields, asdict
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

from core.errors import ValidationError
from core.leveling import CATEGORY_DIVISOR, PROFILE_DIVISOR, exp_needed, progress_percent


def _from_row(cls, row):
    """Build a dataclass from an asyncpg Record (or any mapping), ignoring unknown columns."""
    if row is None:
        return None
    data = dict(row)
    return cls(**{f.name: data[f.name] for f in fields(cls) if f.name in data})


# -------------------------------
# 🧍 Hunter profile
# -------------------------------
@dataclass
class HunterProfile:
    user_id: int
    name: Optional[str] = None
    level: int = 1
    exp: int = 0
    hp: int = 100
    gold_earned: int = 0
    gold_spent: int = 0
    streak: int = 0
    max_streak: int = 0
    progress_percentage: float = 0
    last_active_date: Optional[date] = None
    exp_history: Dict[str, int] = field(default_factory=dict)
    timezone: Optional[str] = None
    current_pfp_url: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        profile = _from_row(cls, row)
        if profile is not None and profile.exp_history is None:
            profile.exp_history = {}
        return profile

    @property
    def spendable_gold(self) -> int:
        return self.gold_earned - self.gold_spent

    @property
    def exp_needed(self) -> int:
        return exp_needed(self.level, PROFILE_DIVISOR)

    @property
    def level_progress(self) -> float:
        return progress_percent(self.level, self.exp, PROFILE_DIVISOR)


@dataclass
class CategoryProgression:
    id: int
    user_id: int
    name: str
    level: int = 1
    exp: int = 0
    color: Optional[str] = None
    icon: Optional[str] = None

    from_row = classmethod(_from_row)

    @property
    def exp_needed(self) -> int:
        return exp_needed(self.level, CATEGORY_DIVISOR)


# -------------------------------
# ⚔️ Completable records
# -------------------------------
QUEST_TYPES = ("daily", "weekly", "monthly")
PENALTY_QUEST_TYPES = ("daily", "weekly")


@dataclass
class Quest:
    id: int
    user_id: int
    title: str
    quest_type: str
    difficulty: str
    exp_reward: int
    hp_reward: int
    description: Optional[str] = None
    status_category_id: Optional[int] = None
    completed: bool = False
    completed_at: Optional[datetime] = None

    from_row = classmethod(_from_row)

    @property
    def is_daily(self) -> bool:
        return (self.quest_type or "").lower() == "daily"


@dataclass
class BossBattle:
    id: int
    user_id: int
    name: str
    difficulty: str
    gold: int = 0
    battle_date: Optional[date] = None
    status_category_id: Optional[int] = None
    completed: bool = False
    completed_at: Optional[datetime] = None

    from_row = classmethod(_from_row)


@dataclass
class Goal:
    id: int
    user_id: int
    category_id: int
    title: str
    exp_reward: int = 100
    description: Optional[str] = None
    completed: bool = False
    completed_at: Optional[datetime] = None

    from_row = classmethod(_from_row)


# -------------------------------
# 🛒 Items
# -------------------------------
class ItemType(str, Enum):
    SHOP = "shop"        # costs gold, one-time
    REWARD = "reward"    # costs HP, repeatable


@dataclass
class Item:
    id: int
    user_id: int
    name: str
    item_type: str
    price: int
    required_level: int = 1
    purchased: bool = False
    purchased_at: Optional[datetime] = None
    image_url: Optional[str] = None

    from_row = classmethod(_from_row)


@dataclass
class ProfilePicture:
    id: int
    user_id: int
    level_threshold: int
    pfp_url: str

    from_row = classmethod(_from_row)


# -------------------------------
# 🏅 Badges
# -------------------------------
class CriteriaKind(str, Enum):
    LEVEL = "level"
    EXP = "exp"
    GOLD = "gold"
    QUESTS = "quests"
    BATTLES = "battles"


@dataclass(frozen=True)
class BadgeCriteria:
    kind: CriteriaKind
    threshold: float

    @classmethod
    def parse(cls, criteria_type, criteria_value) -> Optional["BadgeCriteria"]:
        """
        Build criteria from the stored (type, value) pair.

        A missing value means the badge can only be awarded manually.
        """
        if criteria_value is None:
            return None
        if not criteria_type:
            raise ValidationError("Badge criteria value given without a criteria type")
        try:
            kind = CriteriaKind(str(criteria_type).lower())
        except ValueError:
            raise ValidationError(f"Unknown badge criteria type: {criteria_type!r}") from None
        if criteria_value < 0:
            raise ValidationError(f"Badge criteria value cannot be negative: {criteria_value}")
        return cls(kind=kind, threshold=criteria_value)


@dataclass
class Badge:
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    criteria: Optional[BadgeCriteria] = None
    image_url: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        if row is None:
            return None
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            description=row["description"],
            criteria=BadgeCriteria.parse(row["criteria_type"], row["criteria_value"]),
            image_url=row["image_url"],
        )

    @property
    def is_manual(self) -> bool:
        return self.criteria is None


@dataclass
class UserBadge:
    user_id: int
    badge_id: int
    earned_at: Optional[datetime] = None

    from_row = classmethod(_from_row)


# -------------------------------
# ✏️ Partial updates
# -------------------------------
# Fields left as None are not touched.
@dataclass
class _Patch:

    def changes(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class QuestPatch(_Patch):
    title: Optional[str] = None
    description: Optional[str] = None
    quest_type: Optional[str] = None
    difficulty: Optional[str] = None
    exp_reward: Optional[int] = None
    hp_reward: Optional[int] = None
    status_category_id: Optional[int] = None


@dataclass
class BattlePatch(_Patch):
    name: Optional[str] = None
    difficulty: Optional[str] = None
    gold: Optional[int] = None
    battle_date: Optional[date] = None
    status_category_id: Optional[int] = None


@dataclass
class GoalPatch(_Patch):
    title: Optional[str] = None
    description: Optional[str] = None
    exp_reward: Optional[int] = None


# -------------------------------
# 📦 Operation result
# -------------------------------
@dataclass
class EventResult:
    profile: HunterProfile
    category: Optional[CategoryProgression] = None
    awarded_badges: List[Badge] = field(default_factory=list)
