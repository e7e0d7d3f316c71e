# repositories/category_repository.py


async def insert_category(conn, user_id: int, name: str, color: str = None, icon: str = None):
    return await conn.fetchrow("""
        INSERT INTO status_categories (user_id, name, color, icon)
        VALUES ($1, $2, $3, $4)
        RETURNING *
    """, user_id, name, color, icon)


async def get_category(conn, user_id: int, category_id: int):
    return await conn.fetchrow("""
        SELECT * FROM status_categories
        WHERE id = $1 AND user_id = $2
    """, category_id, user_id)


async def lock_category(conn, user_id: int, category_id: int):
    return await conn.fetchrow("""
        SELECT * FROM status_categories
        WHERE id = $1 AND user_id = $2
        FOR UPDATE
    """, category_id, user_id)


async def update_category_progress(conn, user_id: int, category_id: int, level: int, exp: int):
    return await conn.fetchrow("""
        UPDATE status_categories
        SET level = $3,
            exp = $4,
            updated_at = NOW()
        WHERE id = $1 AND user_id = $2
        RETURNING *
    """, category_id, user_id, level, exp)


async def list_categories(conn, user_id: int):
    return await conn.fetch("""
        SELECT * FROM status_categories
        WHERE user_id = $1
        ORDER BY created_at
    """, user_id)
