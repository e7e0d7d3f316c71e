import pytest

from core.errors import InvalidDifficulty, ValidationError
from core.rewards import DIFFICULTY_REWARDS, RANKS, normalize_rank, resolve_reward, reward_for


def test_rank_table_defaults():
    assert RANKS == ("S", "A", "B", "C", "D")

    spec = reward_for("C")
    assert (spec.exp, spec.hp, spec.gold) == (100, 50, 0)

    spec = reward_for("S")
    assert (spec.exp, spec.hp) == (1000, 500)


def test_every_penalty_is_non_positive():
    assert all(row["penalty"] <= 0 for row in DIFFICULTY_REWARDS.values())


@pytest.mark.parametrize("raw", ["b", " B ", "B"])
def test_rank_is_normalized(raw):
    assert normalize_rank(raw) == "B"


@pytest.mark.parametrize("raw", ["E", "", None, 3, "SS"])
def test_unknown_rank_is_refused(raw):
    with pytest.raises(InvalidDifficulty) as info:
        reward_for(raw)
    assert info.value.kind == "invalid_difficulty"


def test_overrides_replace_table_value():
    spec = resolve_reward("A", exp=42)
    assert spec.exp == 42
    assert spec.hp == 250

    spec = resolve_reward("A", hp=0, gold=30)
    assert (spec.exp, spec.hp, spec.gold) == (500, 0, 30)


def test_penalty_is_not_overridable():
    assert resolve_reward("D", exp=1, hp=1, gold=1).penalty == reward_for("D").penalty


def test_negative_gold_is_refused():
    with pytest.raises(ValidationError):
        resolve_reward("B", gold=-5)


def test_negative_exp_is_refused():
    with pytest.raises(ValidationError):
        resolve_reward("C", exp=-10)
