"""
Relational schema for Placify.

Tables:
- users: accounts (email + bcrypt hash)
- revoked_tokens: JWT ids invalidated by sign-out
- profiles: one academic profile per user (upserted on submit)
- analyses: every AI analysis, newest is what the dashboard shows

analysis_data holds the AI JSON payload as text so the same DDL runs on
PostgreSQL and SQLite.
"""

from typing import List

from sqlalchemy.engine import Engine

from app.db.postgres import engine as default_engine

SCHEMA_DDL: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id INTEGER PRIMARY KEY {autoincrement},
        email VARCHAR(255) NOT NULL UNIQUE,
        password_hash VARCHAR(255) NOT NULL,
        full_name VARCHAR(200),
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS revoked_tokens (
        jti VARCHAR(64) PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        revoked_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        expires_at TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        profile_id INTEGER PRIMARY KEY {autoincrement},
        user_id INTEGER NOT NULL UNIQUE REFERENCES users(user_id),
        cgpa NUMERIC(4, 2),
        tenth_percentage NUMERIC(5, 2),
        twelfth_percentage NUMERIC(5, 2),
        backlogs INTEGER NOT NULL DEFAULT 0,
        branch VARCHAR(100),
        codolio_profile VARCHAR(500),
        technical_skills_rating INTEGER,
        personal_reflection TEXT,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS analyses (
        analysis_id INTEGER PRIMARY KEY {autoincrement},
        user_id INTEGER NOT NULL REFERENCES users(user_id),
        profile_id INTEGER NOT NULL REFERENCES profiles(profile_id),
        overall_score NUMERIC(5, 2) NOT NULL DEFAULT 0,
        analysis_data TEXT NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_analyses_user_created ON analyses (user_id, created_at)",
]


def _render(ddl: str, dialect: str) -> str:
    # SQLite auto-increments INTEGER PRIMARY KEY; PostgreSQL needs an identity column.
    autoincrement = "GENERATED BY DEFAULT AS IDENTITY" if dialect == "postgresql" else ""
    return ddl.format(autoincrement=autoincrement)


def init_schema(engine: Engine = None) -> None:
    """Create all tables if they do not exist. Safe to call on every startup."""
    engine = engine or default_engine
    dialect = engine.dialect.name
    with engine.begin() as connection:
        for ddl in SCHEMA_DDL:
            connection.exec_driver_sql(_render(ddl, dialect))
