"""Application constants."""

# File names for data storage
HISTORY_DB_FILENAME = "history.db"
SAVED_QUERIES_DB_FILENAME = "saved_queries.db"
CONNECTIONS_FILENAME = "connections.json"
SETTINGS_FILENAME = "settings.json"

# Directory names
APP_DIR_NAME = ".query"

MAX_RECENT_PROJECTS = 10

# Nullability tokens as reported by information_schema.columns.is_nullable
SQL_NULLABLE_YES = "YES"
SQL_NULLABLE_NO = "NO"
