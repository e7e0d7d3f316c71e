from dataclasses import dataclass, replace

from core.errors import InvalidDifficulty, ValidationError

# Default rewards per difficulty rank.
# penalty is an EXP delta applied when a daily/weekly quest is failed (always <= 0).
DIFFICULTY_REWARDS = {
    "S": {"exp": 1000, "hp": 500, "gold": 0, "penalty": 0},
    "A": {"exp": 500,  "hp": 250, "gold": 0, "penalty": 0},
    "B": {"exp": 250,  "hp": 100, "gold": 0, "penalty": 0},
    "C": {"exp": 100,  "hp": 50,  "gold": 0, "penalty": 0},
    "D": {"exp": 50,   "hp": 25,  "gold": 0, "penalty": 0},
}

RANKS = tuple(DIFFICULTY_REWARDS)


@dataclass(frozen=True)
class RewardSpec:
    rank: str
    exp: int
    hp: int
    gold: int
    penalty: int


def normalize_rank(rank) -> str:
    if not isinstance(rank, str) or rank.strip().upper() not in DIFFICULTY_REWARDS:
        raise InvalidDifficulty(rank)
    return rank.strip().upper()


def reward_for(rank) -> RewardSpec:
    """Table defaults for a rank."""
    rank = normalize_rank(rank)
    row = DIFFICULTY_REWARDS[rank]
    return RewardSpec(rank=rank, exp=row["exp"], hp=row["hp"], gold=row["gold"], penalty=row["penalty"])


def resolve_reward(rank, exp: int = None, hp: int = None, gold: int = None) -> RewardSpec:
    """
    RewardCalculator.

    Supplied overrides replace the table value for that field entirely,
    fields left as None keep the table default. The penalty always comes
    from the table.
    """
    spec = reward_for(rank)

    if exp is not None and exp < 0:
        raise ValidationError(f"EXP reward cannot be negative: {exp}")
    if gold is not None and gold < 0:
        raise ValidationError(f"Gold reward cannot be negative: {gold}")

    overrides = {}
    if exp is not None:
        overrides["exp"] = int(exp)
    if hp is not None:
        overrides["hp"] = int(hp)
    if gold is not None:
        overrides["gold"] = int(gold)

    return replace(spec, **overrides) if overrides else spec
