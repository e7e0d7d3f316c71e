import asyncpg
import pytest

from core.errors import ConflictError, LevelLockedError, NotFoundError, StorageError, ValidationError
from services.economy_service import economy_service
from services.ledger import ledger_transaction
from services.profile_service import profile_service
from tests.conftest import OTHER_USER_ID, USER_ID


async def test_ensure_profile_creates_once(db):
    assert await profile_service.ensure_profile(USER_ID, "Jin") is True
    assert await profile_service.ensure_profile(USER_ID, "Jin") is False

    profile = await profile_service.get_profile(USER_ID)
    assert (profile.level, profile.exp, profile.timezone) == (1, 0, "UTC")


async def test_get_missing_profile(db):
    with pytest.raises(NotFoundError):
        await profile_service.get_profile(USER_ID)


async def test_profile_text(db, hunter):
    text = await profile_service.build_profile_text(USER_ID)
    assert "Jin" in text
    assert "0 / 100" in text


async def test_profile_picture_is_level_gated(db, hunter):
    picture = await profile_service.add_profile_picture(USER_ID, "https://img.example/knight.png", 3)

    with pytest.raises(LevelLockedError):
        await profile_service.select_profile_picture(USER_ID, picture.id)

    db.profiles[USER_ID]["level"] = 3
    profile = await profile_service.select_profile_picture(USER_ID, picture.id)
    assert profile.current_pfp_url == "https://img.example/knight.png"


async def test_serialization_failure_becomes_conflict(db, hunter):
    db.fail_next = asyncpg.exceptions.SerializationError("could not serialize access")

    with pytest.raises(ConflictError) as info:
        async with ledger_transaction(USER_ID, "TEST"):
            pass

    assert info.value.kind == "conflict"
    assert isinstance(info.value.__cause__, asyncpg.exceptions.SerializationError)


async def test_driver_failure_becomes_storage_error(db, hunter):
    db.fail_next = ConnectionResetError("connection lost")

    with pytest.raises(StorageError):
        async with ledger_transaction(USER_ID, "TEST"):
            pass


async def test_rename_profile(db, hunter):
    profile = await profile_service.rename_profile(USER_ID, "  Sung Jin-Woo ")
    assert profile.name == "Sung Jin-Woo"
    assert db.profiles[USER_ID]["name"] == "Sung Jin-Woo"

    with pytest.raises(ValidationError):
        await profile_service.rename_profile(USER_ID, "   ")
    with pytest.raises(ValidationError):
        await profile_service.rename_profile(USER_ID, "x" * 65)
    with pytest.raises(NotFoundError):
        await profile_service.rename_profile(OTHER_USER_ID, "Ghost")


async def test_profile_text_lists_purchased_items(db, hunter):
    db.profiles[USER_ID].update(gold_earned=100, name="<Jin>")
    sword = db.add_item(USER_ID, price=30, name="Sword & Shield")
    db.add_item(USER_ID, price=30, name="Unbought Helm")
    db.add_item(USER_ID, item_type="reward", price=5, name="Cake")
    await economy_service.purchase_shop_item(USER_ID, sword["id"])

    text = await profile_service.build_profile_text(USER_ID)

    assert "Sword &amp; Shield" in text
    assert "Unbought Helm" not in text
    assert "Cake" not in text
    assert "&lt;Jin&gt;" in text


async def test_empty_inventory(db, hunter):
    assert "Inventory:     empty" in await profile_service.build_profile_text(USER_ID)
