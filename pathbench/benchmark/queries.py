"""
Named statements shared by both backends.

Values are always bound through ``$n`` placeholders; statements that need
per-iteration values are bound with :meth:`QueryDescriptor.with_params`.
"""

from pathbench.query import delete_all, statement

USERS_TABLE = "users"
SESSIONS_TABLE = "sessions"

USER_COLUMNS = (
    "id",
    "name",
    "email",
    "email_verified",
    "image",
    "created_at",
    "updated_at",
    "is_anonymous",
)

SESSION_COLUMNS = (
    "id",
    "expires_at",
    "token",
    "created_at",
    "updated_at",
    "ip_address",
    "user_agent",
    "user_id",
    "timezone",
    "city",
    "country",
)

CREATE_SCHEMA = statement(
    "create_schema",
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        email_verified BOOLEAN NOT NULL DEFAULT false,
        image TEXT,
        created_at BIGINT NOT NULL,
        updated_at BIGINT NOT NULL,
        is_anonymous BOOLEAN NOT NULL DEFAULT false
    );
    CREATE TABLE IF NOT EXISTS sessions (
        id TEXT PRIMARY KEY,
        expires_at BIGINT NOT NULL,
        token TEXT NOT NULL UNIQUE,
        created_at BIGINT NOT NULL,
        updated_at BIGINT NOT NULL,
        ip_address TEXT,
        user_agent TEXT,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        timezone TEXT,
        city TEXT,
        country TEXT
    );
    CREATE INDEX IF NOT EXISTS idx_sessions_user_id ON sessions(user_id);
    CREATE INDEX IF NOT EXISTS idx_users_created_at ON users(created_at)
    """,
)

# sessions reference users, so they go first
CLEAN_SESSIONS = delete_all("clean_sessions", SESSIONS_TABLE)
CLEAN_USERS = delete_all("clean_users", USERS_TABLE)

WARMUP = statement("warmup", "SELECT 1")

POINT_LOOKUP = statement("point_lookup", "SELECT * FROM users WHERE id = $1")
FILTERED_SCAN = statement(
    "filtered_scan", "SELECT * FROM users WHERE email_verified = true LIMIT 50"
)
JOIN = statement(
    "join",
    """
    SELECT u.id AS user_id, u.name AS user_name, s.id AS session_id, s.created_at AS session_created
    FROM users u
    INNER JOIN sessions s ON u.id = s.user_id
    LIMIT 50
    """,
)
AGGREGATION = statement("aggregation", "SELECT COUNT(*) AS count FROM users")
BULK_READ = statement(
    "bulk_read", "SELECT * FROM users ORDER BY created_at DESC LIMIT $1"
)
UPDATE_USER_NAME = statement(
    "update_user_name", "UPDATE users SET name = $1, updated_at = $2 WHERE id = $3"
)

SIMPLE_SELECT = statement("simple_select", "SELECT * FROM users LIMIT 10")
COUNT_QUERY = statement("count_query", "SELECT COUNT(*) FROM sessions")
FILTERED_SELECT = statement(
    "filtered_select", "SELECT * FROM users WHERE email_verified = true LIMIT 10"
)
JOIN_QUERY = statement(
    "join_query",
    "SELECT u.name, s.created_at FROM users u JOIN sessions s ON u.id = s.user_id LIMIT 5",
)

CONCURRENT_COUNT = statement(
    "concurrent_count", "SELECT COUNT(*) FROM users WHERE email_verified = true"
)

RAW_SQL_COUNT = statement(
    "raw_sql_count", "SELECT COUNT(*) AS count FROM users WHERE email_verified = true"
)
RAW_SQL_COMPLEX = statement(
    "raw_sql_complex",
    """
    SELECT u.name, COUNT(s.id) AS session_count
    FROM users u
    LEFT JOIN sessions s ON u.id = s.user_id
    GROUP BY u.id, u.name
    HAVING COUNT(s.id) > 0
    ORDER BY session_count DESC
    LIMIT 20
    """,
)
