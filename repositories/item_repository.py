# repositories/item_repository.py


# -------------------------------
# 🛒 Shop / reward items
# -------------------------------
async def insert_item(
    conn,
    user_id: int,
    name: str,
    item_type: str,
    price: int,
    required_level: int = 1,
    image_url: str = None
):
    return await conn.fetchrow("""
        INSERT INTO items (user_id, name, item_type, price, required_level, image_url)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING *
    """, user_id, name, item_type, price, required_level, image_url)


async def lock_item(conn, user_id: int, item_id: int):
    return await conn.fetchrow("""
        SELECT * FROM items
        WHERE id = $1 AND user_id = $2
        FOR UPDATE
    """, item_id, user_id)


async def mark_item_purchased(conn, user_id: int, item_id: int):
    """Compare-and-set on the one-time `purchased` flag of a shop item."""
    return await conn.fetchrow("""
        UPDATE items
        SET purchased = TRUE,
            purchased_at = NOW()
        WHERE id = $1 AND user_id = $2
          AND item_type = 'shop'
          AND purchased = FALSE
        RETURNING *
    """, item_id, user_id)


async def list_items(conn, user_id: int, item_type: str):
    return await conn.fetch("""
        SELECT * FROM items
        WHERE user_id = $1 AND item_type = $2
        ORDER BY price ASC
    """, user_id, item_type)


async def list_purchased_items(conn, user_id: int):
    return await conn.fetch("""
        SELECT * FROM items
        WHERE user_id = $1 AND item_type = 'shop' AND purchased = TRUE
        ORDER BY purchased_at DESC
    """, user_id)


# -------------------------------
# 🖼 Profile pictures
# -------------------------------
async def insert_profile_picture(conn, user_id: int, pfp_url: str, level_threshold: int = 1):
    return await conn.fetchrow("""
        INSERT INTO profile_pictures (user_id, pfp_url, level_threshold)
        VALUES ($1, $2, $3)
        RETURNING *
    """, user_id, pfp_url, level_threshold)


async def get_profile_picture(conn, user_id: int, picture_id: int):
    return await conn.fetchrow("""
        SELECT * FROM profile_pictures
        WHERE id = $1 AND user_id = $2
    """, picture_id, user_id)


async def list_profile_pictures(conn, user_id: int):
    return await conn.fetch("""
        SELECT * FROM profile_pictures
        WHERE user_id = $1
        ORDER BY level_threshold
    """, user_id)
