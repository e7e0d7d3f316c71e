import logging

from database import get_pool


async def create_tables(pool=None):
    pool = pool or await get_pool()
    async with pool.acquire() as conn:
        # -------------------------------
        # 🔹 Hunter profiles
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS profiles (
                id SERIAL PRIMARY KEY,
                user_id BIGINT UNIQUE NOT NULL,
                name TEXT,
                level INTEGER NOT NULL DEFAULT 1 CHECK (level >= 1),
                exp BIGINT NOT NULL DEFAULT 0 CHECK (exp >= 0),
                hp INTEGER NOT NULL DEFAULT 100 CHECK (hp BETWEEN 0 AND 100),
                gold_earned BIGINT NOT NULL DEFAULT 0 CHECK (gold_earned >= 0),
                gold_spent BIGINT NOT NULL DEFAULT 0 CHECK (gold_spent >= 0),
                streak INTEGER NOT NULL DEFAULT 0 CHECK (streak >= 0),
                max_streak INTEGER NOT NULL DEFAULT 0,
                progress_percentage DOUBLE PRECISION NOT NULL DEFAULT 0,
                last_active_date DATE,
                exp_history JSONB NOT NULL DEFAULT '{}'::jsonb,
                timezone TEXT,
                current_pfp_url TEXT,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                updated_at TIMESTAMPTZ DEFAULT NOW()
            )
        """)

        # -------------------------------
        # 🔹 Life categories (status_categories)
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS status_categories (
                id SERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL,
                name TEXT NOT NULL,
                level INTEGER NOT NULL DEFAULT 1 CHECK (level >= 1),
                exp BIGINT NOT NULL DEFAULT 0 CHECK (exp >= 0),
                color TEXT,
                icon TEXT,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                updated_at TIMESTAMPTZ DEFAULT NOW(),
                FOREIGN KEY(user_id) REFERENCES profiles(user_id) ON DELETE CASCADE
            )
        """)

        # -------------------------------
        # 🔹 Quests
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS quests (
                id SERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL,
                title TEXT NOT NULL,
                description TEXT,
                quest_type TEXT NOT NULL DEFAULT 'daily',
                difficulty TEXT NOT NULL,
                exp_reward INTEGER NOT NULL,
                hp_reward INTEGER NOT NULL,
                status_category_id INTEGER REFERENCES status_categories(id) ON DELETE SET NULL,
                completed BOOLEAN NOT NULL DEFAULT FALSE,
                completed_at TIMESTAMPTZ,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                FOREIGN KEY(user_id) REFERENCES profiles(user_id) ON DELETE CASCADE
            )
        """)

        # -------------------------------
        # 🔹 Boss battles
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS boss_battles (
                id SERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL,
                name TEXT NOT NULL,
                difficulty TEXT NOT NULL,
                gold INTEGER NOT NULL DEFAULT 0 CHECK (gold >= 0),
                battle_date DATE,
                status_category_id INTEGER REFERENCES status_categories(id) ON DELETE SET NULL,
                completed BOOLEAN NOT NULL DEFAULT FALSE,
                completed_at TIMESTAMPTZ,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                FOREIGN KEY(user_id) REFERENCES profiles(user_id) ON DELETE CASCADE
            )
        """)

        # -------------------------------
        # 🔹 Goals
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS goals (
                id SERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL,
                category_id INTEGER NOT NULL REFERENCES status_categories(id) ON DELETE CASCADE,
                title TEXT NOT NULL,
                description TEXT,
                exp_reward INTEGER NOT NULL DEFAULT 100,
                completed BOOLEAN NOT NULL DEFAULT FALSE,
                completed_at TIMESTAMPTZ,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                FOREIGN KEY(user_id) REFERENCES profiles(user_id) ON DELETE CASCADE
            )
        """)

        # -------------------------------
        # 🔹 Shop and reward items
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS items (
                id SERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL,
                name TEXT NOT NULL,
                item_type TEXT NOT NULL CHECK (item_type IN ('shop', 'reward')),
                price INTEGER NOT NULL CHECK (price >= 0),
                required_level INTEGER NOT NULL DEFAULT 1 CHECK (required_level >= 1),
                purchased BOOLEAN NOT NULL DEFAULT FALSE,
                purchased_at TIMESTAMPTZ,
                image_url TEXT,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                FOREIGN KEY(user_id) REFERENCES profiles(user_id) ON DELETE CASCADE
            )
        """)

        # -------------------------------
        # 🔹 Badges + earned badges
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS badges (
                id SERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL,
                name TEXT NOT NULL,
                description TEXT,
                criteria_type TEXT CHECK (criteria_type IN ('level', 'exp', 'gold', 'quests', 'battles')),
                criteria_value DOUBLE PRECISION CHECK (criteria_value >= 0),
                image_url TEXT,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                FOREIGN KEY(user_id) REFERENCES profiles(user_id) ON DELETE CASCADE
            )
        """)

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS user_badges (
                id SERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL,
                badge_id INTEGER NOT NULL REFERENCES badges(id) ON DELETE CASCADE,
                earned_at TIMESTAMPTZ DEFAULT NOW(),
                UNIQUE(user_id, badge_id),
                FOREIGN KEY(user_id) REFERENCES profiles(user_id) ON DELETE CASCADE
            )
        """)

        # -------------------------------
        # 🔹 Level-gated profile pictures
        # -------------------------------
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS profile_pictures (
                id SERIAL PRIMARY KEY,
                user_id BIGINT NOT NULL,
                level_threshold INTEGER NOT NULL DEFAULT 1,
                pfp_url TEXT NOT NULL,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                FOREIGN KEY(user_id) REFERENCES profiles(user_id) ON DELETE CASCADE
            )
        """)

        # -------------------------------
        # 🔹 Indexes
        # -------------------------------
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_quests_user_id ON quests(user_id)")
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_battles_user_id ON boss_battles(user_id)")
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_goals_user_id ON goals(user_id)")
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_items_user_id ON items(user_id)")
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_badges_user_id ON badges(user_id)")
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_categories_user_id ON status_categories(user_id)")

        logging.info("✅ Tables created or already exist")
