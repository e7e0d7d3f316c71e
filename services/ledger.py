# services/ledger.py

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

import asyncpg

from core.errors import (
    AlreadyCompletedError,
    ConflictError,
    EngineError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from core.leveling import CATEGORY_DIVISOR, PROFILE_DIVISOR, advance, apply_penalty, clamp_hp
from core.models import CategoryProgression, HunterProfile
from database import get_pool
from repositories import category_repository as category_repo
from repositories import completion_repository as completion_repo
from repositories import profile_repository as profile_repo

CONFLICT_ERRORS = (
    asyncpg.exceptions.SerializationError,
    asyncpg.exceptions.DeadlockDetectedError,
)
STORAGE_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
)


@dataclass
class LedgerContext:
    """An open transaction holding the row lock on one user's profile."""
    conn: object
    user_id: int
    profile: HunterProfile

    def refresh(self, row):
        self.profile = HunterProfile.from_row(row)
        return self.profile


# =====================================================
# 🔌 Storage error translation
# =====================================================
@asynccontextmanager
async def storage_errors(operation: str):
    try:
        yield
    except EngineError:
        raise
    except CONFLICT_ERRORS as exc:
        logging.warning(f"⚠️ [{operation}] Concurrent write conflict: {exc}")
        raise ConflictError(f"{operation}: concurrent update, try again") from exc
    except STORAGE_ERRORS as exc:
        logging.exception(f"❌ [{operation}] Storage failure")
        raise StorageError(f"{operation}: storage failure ({exc.__class__.__name__})") from exc


@asynccontextmanager
async def read_connection(operation: str = "READ"):
    pool = await get_pool()
    async with storage_errors(operation):
        async with pool.acquire() as conn:
            yield conn


# =====================================================
# 🔒 Ledger transaction
# =====================================================
@asynccontextmanager
async def ledger_transaction(user_id: int, operation: str = "LEDGER"):
    """
    One atomic unit of work for one profile.

    The profile row is locked first so concurrent operations on the same
    profile run one after another and always see the latest committed
    ledger. Any exception rolls back every write made inside the block.
    """
    pool = await get_pool()
    async with storage_errors(operation):
        async with pool.acquire() as conn:
            async with conn.transaction():
                row = await profile_repo.lock_profile(conn, user_id)
                if row is None:
                    raise NotFoundError("Profile", user_id)
                yield LedgerContext(conn=conn, user_id=user_id, profile=HunterProfile.from_row(row))


# =====================================================
# 🏁 Completion flag transitions
# =====================================================
async def complete_entity(ctx: LedgerContext, table: str, label: str, entity_id: int):
    """
    Flip `completed` false -> true with a compare-and-set.

    The flag write is the guard: if it does not match, nothing else in the
    transaction runs.
    """
    row = await completion_repo.mark_completed(ctx.conn, table, ctx.user_id, entity_id)
    if row is not None:
        return row

    existing = await completion_repo.get_for_update(ctx.conn, table, ctx.user_id, entity_id)
    if existing is None:
        raise NotFoundError(label, entity_id)
    raise AlreadyCompletedError(label, entity_id)


async def uncomplete_entity(ctx: LedgerContext, table: str, label: str, entity_id: int):
    row = await completion_repo.mark_uncompleted(ctx.conn, table, ctx.user_id, entity_id)
    if row is not None:
        return row

    existing = await completion_repo.get_for_update(ctx.conn, table, ctx.user_id, entity_id)
    if existing is None:
        raise NotFoundError(label, entity_id)
    raise ValidationError(f"{label} {entity_id} is not completed")


# =====================================================
# ✨ Ledger deltas
# =====================================================
async def grant_profile_reward(ctx: LedgerContext, exp: int, hp: int = 0) -> HunterProfile:
    profile = ctx.profile
    level, new_exp = advance(profile.level, profile.exp, exp, PROFILE_DIVISOR)
    new_hp = clamp_hp(profile.hp + hp)

    row = await profile_repo.update_progression(ctx.conn, ctx.user_id, level, new_exp, new_hp)
    return ctx.refresh(row)


async def grant_category_exp(ctx: LedgerContext, category_id: int, exp: int) -> CategoryProgression:
    row = await category_repo.lock_category(ctx.conn, ctx.user_id, category_id)
    if row is None:
        raise NotFoundError("Category", category_id)

    category = CategoryProgression.from_row(row)
    level, new_exp = advance(category.level, category.exp, exp, CATEGORY_DIVISOR)

    row = await category_repo.update_category_progress(ctx.conn, ctx.user_id, category_id, level, new_exp)
    return CategoryProgression.from_row(row)


async def grant_gold(ctx: LedgerContext, gold: int) -> HunterProfile:
    if gold <= 0:
        return ctx.profile
    row = await profile_repo.add_gold_earned(ctx.conn, ctx.user_id, gold)
    return ctx.refresh(row)


async def apply_exp_penalty(ctx: LedgerContext, penalty: int) -> HunterProfile:
    profile = ctx.profile
    level, new_exp = apply_penalty(profile.level, profile.exp, penalty, PROFILE_DIVISOR)

    row = await profile_repo.update_progression(ctx.conn, ctx.user_id, level, new_exp, clamp_hp(profile.hp))
    return ctx.refresh(row)
