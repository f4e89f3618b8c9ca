"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Users: one row per registered person
CREATE TABLE IF NOT EXISTS users (
    id              SERIAL PRIMARY KEY,
    uid             VARCHAR(128) UNIQUE NOT NULL,
    name            VARCHAR(200),
    email           VARCHAR(320),
    picture         TEXT,
    custom_user_id  VARCHAR(50) UNIQUE
                    CHECK (custom_user_id ~ '^[a-z0-9_-]{3,50}$'),
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Accounts: savings or debt ledgers; schedules are JSONB sub-documents
CREATE TABLE IF NOT EXISTS accounts (
    id              SERIAL PRIMARY KEY,
    user_id         VARCHAR(128) NOT NULL REFERENCES users(uid) ON DELETE CASCADE,
    name            VARCHAR(100) NOT NULL,
    balance         NUMERIC(14,2) NOT NULL DEFAULT 0,
    due_date        VARCHAR(32),
    description     TEXT DEFAULT '',
    type            VARCHAR(10) NOT NULL CHECK (type IN ('savings', 'debt')),
    monthly_payment JSONB,
    income_schedule JSONB,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW(),
    CHECK (monthly_payment IS NULL OR income_schedule IS NULL),
    CHECK (monthly_payment IS NULL OR type = 'debt'),
    CHECK (income_schedule IS NULL OR type = 'savings')
);

-- Transactions: activity log of account changes
CREATE TABLE IF NOT EXISTS transactions (
    id              SERIAL PRIMARY KEY,
    account_id      VARCHAR(64) NOT NULL,
    account_name    VARCHAR(100) NOT NULL,
    user_id         VARCHAR(128) NOT NULL REFERENCES users(uid) ON DELETE CASCADE,
    type            VARCHAR(10) NOT NULL CHECK (type IN ('create', 'update', 'delete')),
    previous_balance NUMERIC(14,2),
    new_balance     NUMERIC(14,2),
    description     TEXT NOT NULL,
    timestamp       TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Indexes for the common queries
CREATE INDEX IF NOT EXISTS idx_accounts_user_created ON accounts(user_id, created_at DESC);
CREATE INDEX IF NOT EXISTS idx_accounts_user_type ON accounts(user_id, type);
CREATE INDEX IF NOT EXISTS idx_transactions_user_ts ON transactions(user_id, timestamp DESC);
CREATE INDEX IF NOT EXISTS idx_transactions_account ON transactions(account_id);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
