# repositories/activity_repository.py


# -------------------------------
# ⚔️ Quests
# -------------------------------
async def insert_quest(
    conn,
    user_id: int,
    title: str,
    quest_type: str,
    difficulty: str,
    exp_reward: int,
    hp_reward: int,
    description: str = None,
    status_category_id: int = None
):
    return await conn.fetchrow("""
        INSERT INTO quests
            (user_id, title, description, quest_type, difficulty,
             exp_reward, hp_reward, status_category_id)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        RETURNING *
    """, user_id, title, description, quest_type, difficulty,
        exp_reward, hp_reward, status_category_id)


async def list_quests(conn, user_id: int, quest_type: str = None):
    if quest_type:
        return await conn.fetch("""
            SELECT * FROM quests
            WHERE user_id = $1 AND LOWER(quest_type) = LOWER($2)
            ORDER BY created_at
        """, user_id, quest_type)

    return await conn.fetch("""
        SELECT * FROM quests
        WHERE user_id = $1
        ORDER BY created_at
    """, user_id)


# -------------------------------
# 🥊 Boss battles
# -------------------------------
async def insert_battle(
    conn,
    user_id: int,
    name: str,
    difficulty: str,
    gold: int,
    battle_date=None,
    status_category_id: int = None
):
    return await conn.fetchrow("""
        INSERT INTO boss_battles
            (user_id, name, difficulty, gold, battle_date, status_category_id)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING *
    """, user_id, name, difficulty, gold, battle_date, status_category_id)


async def list_battles(conn, user_id: int):
    return await conn.fetch("""
        SELECT * FROM boss_battles
        WHERE user_id = $1
        ORDER BY battle_date NULLS LAST, created_at
    """, user_id)


# -------------------------------
# 🎯 Goals
# -------------------------------
async def insert_goal(
    conn,
    user_id: int,
    category_id: int,
    title: str,
    exp_reward: int = 100,
    description: str = None
):
    return await conn.fetchrow("""
        INSERT INTO goals (user_id, category_id, title, description, exp_reward)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
    """, user_id, category_id, title, description, exp_reward)


async def list_goals(conn, user_id: int, category_id: int = None):
    if category_id is not None:
        return await conn.fetch("""
            SELECT * FROM goals
            WHERE user_id = $1 AND category_id = $2
            ORDER BY created_at
        """, user_id, category_id)

    return await conn.fetch("""
        SELECT * FROM goals
        WHERE user_id = $1
        ORDER BY created_at
    """, user_id)
