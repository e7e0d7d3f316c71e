# badges/repository.py

class BadgeRepository:
    def __init__(self, conn):
        self.conn = conn

    async def insert(self, user_id: int, name: str, description=None,
                     criteria_type=None, criteria_value=None, image_url=None):
        return await self.conn.fetchrow("""
            INSERT INTO badges (user_id, name, description, criteria_type, criteria_value, image_url)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
        """, user_id, name, description, criteria_type, criteria_value, image_url)

    async def get(self, user_id: int, badge_id: int):
        return await self.conn.fetchrow("""
            SELECT * FROM badges
            WHERE id = $1 AND user_id = $2
        """, badge_id, user_id)

    async def list_all(self, user_id: int):
        return await self.conn.fetch("""
            SELECT * FROM badges
            WHERE user_id = $1
            ORDER BY created_at
        """, user_id)

    async def list_unearned(self, user_id: int):
        return await self.conn.fetch("""
            SELECT b.* FROM badges b
            WHERE b.user_id = $1
              AND NOT EXISTS (
                  SELECT 1 FROM user_badges ub
                  WHERE ub.user_id = b.user_id AND ub.badge_id = b.id
              )
            ORDER BY b.created_at
        """, user_id)

    async def list_earned(self, user_id: int):
        return await self.conn.fetch("""
            SELECT b.*, ub.earned_at
            FROM user_badges ub
            JOIN badges b ON b.id = ub.badge_id
            WHERE ub.user_id = $1
            ORDER BY ub.earned_at DESC
        """, user_id)

    async def unlock(self, user_id: int, badge_id: int) -> bool:
        """Idempotent insert. Returns True only when a new row was written."""
        row = await self.conn.fetchrow("""
            INSERT INTO user_badges (user_id, badge_id)
            VALUES ($1, $2)
            ON CONFLICT (user_id, badge_id) DO NOTHING
            RETURNING id
        """, user_id, badge_id)
        return row is not None
