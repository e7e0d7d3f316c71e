# repositories/profile_repository.py

# ================================
#  Repository: SQL only
# ================================
# Every function takes an open connection so callers decide the
# transaction boundary.


async def insert_profile(conn, user_id: int, name: str = None, timezone: str = None):
    """Create the profile if it does not exist yet. Returns True when a row was inserted."""
    row = await conn.fetchrow("""
        INSERT INTO profiles (user_id, name, timezone)
        VALUES ($1, $2, $3)
        ON CONFLICT (user_id) DO NOTHING
        RETURNING id
    """, user_id, name, timezone)
    return row is not None


async def get_profile(conn, user_id: int):
    return await conn.fetchrow(
        "SELECT * FROM profiles WHERE user_id = $1",
        user_id
    )


async def lock_profile(conn, user_id: int):
    """
    Row-lock the profile for the rest of the transaction.

    Every ledger operation takes this lock first, which serializes
    concurrent operations on the same profile.
    """
    return await conn.fetchrow(
        "SELECT * FROM profiles WHERE user_id = $1 FOR UPDATE",
        user_id
    )


# -------------------------------
# ✨ EXP / level / HP
# -------------------------------
async def update_progression(conn, user_id: int, level: int, exp: int, hp: int):
    return await conn.fetchrow("""
        UPDATE profiles
        SET level = $2,
            exp = $3,
            hp = $4,
            updated_at = NOW()
        WHERE user_id = $1
        RETURNING *
    """, user_id, level, exp, hp)


# -------------------------------
# 💰 Gold ledger
# -------------------------------
async def add_gold_earned(conn, user_id: int, amount: int):
    return await conn.fetchrow("""
        UPDATE profiles
        SET gold_earned = gold_earned + $2,
            updated_at = NOW()
        WHERE user_id = $1
        RETURNING *
    """, user_id, amount)


async def spend_gold(conn, user_id: int, amount: int):
    """Returns the updated row, or None if the balance no longer covers the amount."""
    return await conn.fetchrow("""
        UPDATE profiles
        SET gold_spent = gold_spent + $2,
            updated_at = NOW()
        WHERE user_id = $1
          AND gold_earned - gold_spent >= $2
        RETURNING *
    """, user_id, amount)


async def spend_hp(conn, user_id: int, amount: int):
    """Returns the updated row, or None if HP no longer covers the amount."""
    return await conn.fetchrow("""
        UPDATE profiles
        SET hp = GREATEST(0, hp - $2),
            updated_at = NOW()
        WHERE user_id = $1
          AND hp >= $2
        RETURNING *
    """, user_id, amount)


# -------------------------------
# 🔥 Streak / daily progress
# -------------------------------
async def update_streak(
    conn,
    user_id: int,
    streak: int,
    max_streak: int,
    progress_percentage: float,
    last_active_date,
    exp_history: dict
):
    return await conn.fetchrow("""
        UPDATE profiles
        SET streak = $2,
            max_streak = $3,
            progress_percentage = $4,
            last_active_date = $5,
            exp_history = $6,
            updated_at = NOW()
        WHERE user_id = $1
        RETURNING *
    """, user_id, streak, max_streak, progress_percentage, last_active_date, exp_history)


# -------------------------------
# 🪪 Name
# -------------------------------
async def update_name(conn, user_id: int, name: str):
    return await conn.fetchrow("""
        UPDATE profiles
        SET name = $2,
            updated_at = NOW()
        WHERE user_id = $1
        RETURNING *
    """, user_id, name)


# -------------------------------
# 🖼 Profile picture
# -------------------------------
async def set_current_pfp(conn, user_id: int, pfp_url: str):
    return await conn.fetchrow("""
        UPDATE profiles
        SET current_pfp_url = $2,
            updated_at = NOW()
        WHERE user_id = $1
        RETURNING *
    """, user_id, pfp_url)
