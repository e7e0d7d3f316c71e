import pytest

from core.errors import ValidationError
from core.models import Badge, BadgeCriteria, CriteriaKind, HunterProfile, QuestPatch


def test_profile_from_row_defaults_history():
    profile = HunterProfile.from_row({"user_id": 5, "exp_history": None, "unknown_column": 1})
    assert profile.exp_history == {}
    assert HunterProfile.from_row(None) is None


def test_profile_derived_values():
    profile = HunterProfile(user_id=5, level=2, exp=150, gold_earned=40, gold_spent=15)
    assert profile.spendable_gold == 25
    assert profile.exp_needed == 200
    assert profile.level_progress == 75


def test_criteria_parse():
    assert BadgeCriteria.parse("LEVEL", 10) == BadgeCriteria(CriteriaKind.LEVEL, 10)
    assert BadgeCriteria.parse("quests", None) is None
    assert BadgeCriteria.parse(None, None) is None


@pytest.mark.parametrize("criteria_type, value", [(None, 5), ("streak", 5), ("gold", -1)])
def test_criteria_parse_refuses(criteria_type, value):
    with pytest.raises(ValidationError):
        BadgeCriteria.parse(criteria_type, value)


def test_badge_without_value_is_manual():
    badge = Badge.from_row({
        "id": 1, "user_id": 5, "name": "Founder", "description": None,
        "criteria_type": "level", "criteria_value": None, "image_url": None,
    })
    assert badge.is_manual


def test_patch_only_carries_set_fields():
    assert QuestPatch(title="Run", exp_reward=0).changes() == {"title": "Run", "exp_reward": 0}
    assert QuestPatch().changes() == {}
