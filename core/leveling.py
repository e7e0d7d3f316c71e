from typing import Tuple

# EXP needed for the next level is level * divisor
PROFILE_DIVISOR = 100
CATEGORY_DIVISOR = 50

HP_MIN = 0
HP_MAX = 100


def exp_needed(level: int, divisor: int = PROFILE_DIVISOR) -> int:
    return level * divisor


def advance(level: int, exp: int, delta: int, divisor: int = PROFILE_DIVISOR) -> Tuple[int, int]:
    """
    Apply an EXP delta and return (new_level, new_exp).

    EXP is cumulative and is not reduced on level-up. The threshold is taken
    from the level *before* the update, so one large delta can jump several
    levels at once and the display progress (exp / exp_needed) may exceed 100%.
    """
    if divisor <= 0:
        raise ValueError(f"divisor must be positive, got {divisor}")

    new_exp = max(0, exp + delta)
    needed = exp_needed(level, divisor)
    new_level = max(1, level + new_exp // needed)
    return new_level, new_exp


def apply_penalty(level: int, exp: int, penalty: int, divisor: int = PROFILE_DIVISOR) -> Tuple[int, int]:
    """Penalties (penalty <= 0) lower EXP but never the level."""
    if penalty > 0:
        raise ValueError(f"penalty must be <= 0, got {penalty}")
    new_level, new_exp = advance(level, exp, penalty, divisor)
    return max(level, new_level), new_exp


def clamp_hp(hp: int) -> int:
    return min(HP_MAX, max(HP_MIN, hp))


def progress_percent(level: int, exp: int, divisor: int = PROFILE_DIVISOR) -> float:
    # can exceed 100, see advance()
    return exp / exp_needed(level, divisor) * 100
