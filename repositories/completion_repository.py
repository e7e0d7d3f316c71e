# repositories/completion_repository.py

# Shared SQL for records that carry a `completed` flag.
# Table names come from this whitelist only, never from callers' input.
COMPLETABLE_TABLES = ("quests", "boss_battles", "goals")


def _table(table: str) -> str:
    if table not in COMPLETABLE_TABLES:
        raise ValueError(f"Not a completable table: {table}")
    return table


async def get_for_update(conn, table: str, user_id: int, entity_id: int):
    return await conn.fetchrow(f"""
        SELECT * FROM {_table(table)}
        WHERE id = $1 AND user_id = $2
        FOR UPDATE
    """, entity_id, user_id)


async def mark_completed(conn, table: str, user_id: int, entity_id: int):
    """
    Compare-and-set false -> true.

    Returns the updated row, or None if the row is missing or already completed.
    """
    return await conn.fetchrow(f"""
        UPDATE {_table(table)}
        SET completed = TRUE,
            completed_at = NOW()
        WHERE id = $1 AND user_id = $2
          AND completed = FALSE
        RETURNING *
    """, entity_id, user_id)


async def mark_uncompleted(conn, table: str, user_id: int, entity_id: int):
    """Compare-and-set true -> false. Granted rewards stay with the profile."""
    return await conn.fetchrow(f"""
        UPDATE {_table(table)}
        SET completed = FALSE,
            completed_at = NULL
        WHERE id = $1 AND user_id = $2
          AND completed = TRUE
        RETURNING *
    """, entity_id, user_id)


async def count_completed(conn, table: str, user_id: int) -> int:
    result = await conn.fetchval(f"""
        SELECT COUNT(*)
        FROM {_table(table)}
        WHERE user_id = $1 AND completed = TRUE
    """, user_id)
    return result or 0


async def update_fields(conn, table: str, user_id: int, entity_id: int, changes: dict):
    """
    Write only the supplied columns. An empty change set just reads the row back.
    Column names must already be validated by the caller's patch type.
    """
    if not changes:
        return await conn.fetchrow(
            f"SELECT * FROM {_table(table)} WHERE id = $1 AND user_id = $2",
            entity_id, user_id
        )

    columns = list(changes)
    assignments = ", ".join(f"{col} = ${i + 3}" for i, col in enumerate(columns))

    return await conn.fetchrow(f"""
        UPDATE {_table(table)}
        SET {assignments}
        WHERE id = $1 AND user_id = $2
        RETURNING *
    """, entity_id, user_id, *[changes[col] for col in columns])
