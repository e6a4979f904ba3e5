"""Fixed diagnostic queries sent verbatim to the server."""

from __future__ import annotations

UPTIME_SQL = """
    SELECT date_trunc('second', current_timestamp - pg_postmaster_start_time()) AS uptime
"""

VERSION_SQL = "SELECT version()"

PUBLIC_TABLES_SQL = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = 'public'
    ORDER BY table_name
"""

EXTENSIONS_SQL = """
    SELECT name, installed_version, default_version
    FROM pg_available_extensions
    WHERE installed_version IS NOT NULL
    ORDER BY name
"""

__all__ = ["EXTENSIONS_SQL", "PUBLIC_TABLES_SQL", "UPTIME_SQL", "VERSION_SQL"]
