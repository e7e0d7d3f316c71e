from datetime import date, timedelta

import pytest

from core.errors import (
    AlreadyCompletedError,
    InvalidDifficulty,
    NotFoundError,
    PenaltyNotApplicable,
    ValidationError,
)
from core.models import QuestPatch
from core.rewards import DIFFICULTY_REWARDS
from services.quest_service import quest_service
from services.streak_service import streak_service
from tests.conftest import OTHER_USER_ID, USER_ID


async def test_complete_quest_levels_up_and_caps_hp(db, hunter):
    quest = db.add_quest(USER_ID, quest_type="weekly", difficulty="C", exp_reward=100, hp_reward=50)

    result = await quest_service.complete_quest(USER_ID, quest["id"])

    assert result.profile.level == 2
    assert result.profile.exp == 100
    assert result.profile.hp == 100
    assert db.tables["quests"][quest["id"]]["completed"] is True
    assert db.tables["quests"][quest["id"]]["completed_at"] is not None


async def test_hp_is_clamped_at_100(db, hunter):
    quest = db.add_quest(USER_ID, quest_type="weekly", difficulty="S", exp_reward=1000, hp_reward=500)

    result = await quest_service.complete_quest(USER_ID, quest["id"])

    assert result.profile.hp == 100
    assert result.profile.level == 11


async def test_second_completion_is_refused_without_reward(db, hunter):
    quest = db.add_quest(USER_ID, quest_type="weekly")
    await quest_service.complete_quest(USER_ID, quest["id"])
    profile_after_first = dict(db.profiles[USER_ID])

    with pytest.raises(AlreadyCompletedError):
        await quest_service.complete_quest(USER_ID, quest["id"])

    assert db.profiles[USER_ID] == profile_after_first
    assert db.rollbacks == 1


async def test_unknown_quest(db, hunter):
    with pytest.raises(NotFoundError):
        await quest_service.complete_quest(USER_ID, 999)


async def test_other_users_quest_is_not_found(db, hunter):
    db.add_profile(OTHER_USER_ID)
    quest = db.add_quest(OTHER_USER_ID, quest_type="weekly")

    with pytest.raises(NotFoundError):
        await quest_service.complete_quest(USER_ID, quest["id"])
    assert db.tables["quests"][quest["id"]]["completed"] is False


async def test_missing_profile(db):
    quest = db.add_quest(USER_ID)
    with pytest.raises(NotFoundError) as info:
        await quest_service.complete_quest(USER_ID, quest["id"])
    assert info.value.entity == "Profile"


async def test_category_exp_is_credited(db, hunter):
    category = db.add_category(USER_ID)
    quest = db.add_quest(USER_ID, quest_type="weekly", exp_reward=120, status_category_id=category["id"])

    result = await quest_service.complete_quest(USER_ID, quest["id"])

    # category threshold is level * 50
    assert result.category.exp == 120
    assert result.category.level == 3
    assert db.categories[category["id"]]["level"] == 3


async def test_missing_category_rolls_back_everything(db, hunter):
    quest = db.add_quest(USER_ID, quest_type="weekly", status_category_id=4242)
    before = dict(db.profiles[USER_ID])

    with pytest.raises(NotFoundError):
        await quest_service.complete_quest(USER_ID, quest["id"])

    assert db.tables["quests"][quest["id"]]["completed"] is False
    assert db.profiles[USER_ID] == before


async def test_uncomplete_keeps_rewards(db, hunter):
    quest = db.add_quest(USER_ID, quest_type="weekly")
    await quest_service.complete_quest(USER_ID, quest["id"])

    result = await quest_service.uncomplete_quest(USER_ID, quest["id"])

    assert db.tables["quests"][quest["id"]]["completed"] is False
    assert db.tables["quests"][quest["id"]]["completed_at"] is None
    assert result.profile.exp == 100

    # can be earned again
    result = await quest_service.complete_quest(USER_ID, quest["id"])
    assert result.profile.exp == 200


async def test_uncomplete_of_open_quest_is_refused(db, hunter):
    quest = db.add_quest(USER_ID, quest_type="weekly")
    with pytest.raises(ValidationError):
        await quest_service.uncomplete_quest(USER_ID, quest["id"])


async def test_daily_quest_drives_the_streak(db, hunter, monkeypatch):
    today = date(2024, 5, 10)
    yesterday = today - timedelta(days=1)
    monkeypatch.setattr("services.streak_service.local_today", lambda tz_name=None: today)
    db.profiles[USER_ID].update(streak=2, max_streak=2, last_active_date=yesterday,
                                exp_history={yesterday.isoformat(): 0})
    quest = db.add_quest(USER_ID, quest_type="Daily")

    result = await quest_service.complete_quest(USER_ID, quest["id"])

    assert result.profile.streak == 3
    assert result.profile.max_streak == 3
    assert result.profile.last_active_date == today
    assert result.profile.exp_history[today.isoformat()] == 100
    assert result.profile.progress_percentage == 100


async def test_weekly_quest_leaves_streak_alone(db, hunter):
    quest = db.add_quest(USER_ID, quest_type="weekly")
    result = await quest_service.complete_quest(USER_ID, quest["id"])
    assert result.profile.last_active_date is None
    assert result.profile.streak == 0


async def test_fail_monthly_quest_has_no_penalty(db, hunter):
    db.profiles[USER_ID]["exp"] = 80
    quest = db.add_quest(USER_ID, quest_type="monthly")

    with pytest.raises(PenaltyNotApplicable) as info:
        await quest_service.fail_quest(USER_ID, quest["id"])

    assert info.value.kind == "penalty_not_applicable"
    assert db.profiles[USER_ID]["exp"] == 80


async def test_fail_daily_quest_applies_rank_penalty(db, hunter, monkeypatch):
    monkeypatch.setitem(DIFFICULTY_REWARDS, "B", {**DIFFICULTY_REWARDS["B"], "penalty": -30})
    db.profiles[USER_ID].update(level=3, exp=20)
    quest = db.add_quest(USER_ID, quest_type="daily", difficulty="B")

    result = await quest_service.fail_quest(USER_ID, quest["id"])

    assert result.profile.exp == 0
    assert result.profile.level == 3
    assert db.tables["quests"][quest["id"]]["completed"] is False


async def test_add_quest_uses_rank_defaults(db, hunter):
    quest = await quest_service.add_quest(USER_ID, "  Read 20 pages ", "WEEKLY", "a")

    assert quest.title == "Read 20 pages"
    assert quest.quest_type == "weekly"
    assert quest.difficulty == "A"
    assert (quest.exp_reward, quest.hp_reward) == (500, 250)


async def test_add_quest_custom_values_replace_defaults(db, hunter):
    quest = await quest_service.add_quest(USER_ID, "Stretch", "daily", "D", exp_reward=7, hp_reward=0)
    assert (quest.exp_reward, quest.hp_reward) == (7, 0)


async def test_add_quest_refuses_bad_input(db, hunter):
    with pytest.raises(InvalidDifficulty):
        await quest_service.add_quest(USER_ID, "Stretch", "daily", "Z")
    with pytest.raises(ValidationError):
        await quest_service.add_quest(USER_ID, "Stretch", "yearly", "D")
    with pytest.raises(NotFoundError):
        await quest_service.add_quest(USER_ID, "Stretch", "daily", "D", category_id=77)


async def test_edit_quest_applies_only_given_fields(db, hunter):
    quest = db.add_quest(USER_ID, title="Old", quest_type="weekly", difficulty="C")

    edited = await quest_service.edit_quest(USER_ID, quest["id"], QuestPatch(difficulty="s", exp_reward=5))

    assert edited.title == "Old"
    assert edited.difficulty == "S"
    assert edited.exp_reward == 5


async def test_standalone_tick_is_idempotent_per_day(db, hunter):
    today = date(2024, 5, 10)
    db.profiles[USER_ID]["exp"] = 40

    first = await streak_service.tick(USER_ID, today)
    second = await streak_service.tick(USER_ID, today)

    assert first.streak == 1
    assert second.streak == 1
    assert second.exp_history == {today.isoformat(): 40}


async def test_negative_exp_reward_is_refused(db, hunter):
    with pytest.raises(ValidationError):
        await quest_service.add_quest(USER_ID, "Stretch", "daily", "D", exp_reward=-50)

    quest = db.add_quest(USER_ID, quest_type="weekly", exp_reward=100)
    with pytest.raises(ValidationError):
        await quest_service.edit_quest(USER_ID, quest["id"], QuestPatch(exp_reward=-1))
    assert db.tables["quests"][quest["id"]]["exp_reward"] == 100
