"""
SQLite database operations for imported service reports and API request logs.
"""

import json
import sqlite3
from datetime import date

from core.config import DB_PATH

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS imports (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT UNIQUE NOT NULL,
        variant TEXT NOT NULL CHECK(variant IN ('spreadsheet', 'text-variant-A', 'text-variant-B')),
        source_name TEXT,
        sr_number TEXT,
        company TEXT,
        report_json TEXT NOT NULL,
        create_date TEXT DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS time_entries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        import_id INTEGER NOT NULL,
        entry_date TEXT,
        onsite_start TEXT,
        onsite_end TEXT,
        lunch_duration REAL,
        travel_to TEXT,
        travel_home TEXT,
        service_work TEXT,
        FOREIGN KEY (import_id) REFERENCES imports(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        file_size_bytes INTEGER,
        file_name TEXT,
        variant TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL,
        entries_extracted INTEGER,
        total_hours REAL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'parse_warning', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)",
    "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)",
    "CREATE INDEX IF NOT EXISTS idx_time_entries_import ON time_entries(import_id)",
]


def get_connection() -> sqlite3.Connection:
    """Get a database connection."""
    return sqlite3.connect(DB_PATH)


def database_available() -> bool:
    """True if the database file exists and holds the imports table."""
    if not DB_PATH.exists():
        return False
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'imports'"
        ).fetchone()
        return row is not None
    except sqlite3.Error:
        return False
    finally:
        conn.close()


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes if they don't exist."""
    conn.execute("PRAGMA foreign_keys = ON")
    cursor = conn.cursor()
    for statement in SCHEMA:
        cursor.execute(statement)
    conn.commit()


def generate_import_name(sr_number: str, as_of_date: date, conn: sqlite3.Connection) -> str:
    """
    Generate unique import name with auto-incremented suffix.

    Example: sr_2024016_2025_11_07_a, sr_unknown_2025_11_07_b
    """
    date_str = as_of_date.strftime("%Y_%m_%d")
    base_pattern = f"sr_{sr_number or 'unknown'}_{date_str}_"

    cursor = conn.cursor()
    cursor.execute(
        "SELECT name FROM imports WHERE name LIKE ? ORDER BY name DESC",
        (f"{base_pattern}%",),
    )
    existing = cursor.fetchall()

    if not existing:
        return f"{base_pattern}a"

    # Find the highest suffix; longer suffixes sort after shorter ones (z < aa)
    highest_suffix = "a"
    for (name,) in existing:
        suffix = name.replace(base_pattern, "")
        if suffix and (len(suffix), suffix) > (len(highest_suffix), highest_suffix):
            highest_suffix = suffix

    return f"{base_pattern}{next_import_suffix(highest_suffix)}"


def next_import_suffix(suffix: str) -> str:
    """Next suffix in column-letter order: a .. z, aa .. az, ba .. zz, aaa."""
    if not suffix:
        return "a"
    if suffix[-1] == "z":
        return next_import_suffix(suffix[:-1]) + "a"
    return suffix[:-1] + chr(ord(suffix[-1]) + 1)


def create_import_record(
    conn: sqlite3.Connection, name: str, report, source_name: str | None = None
) -> int:
    """Create import record holding the full report JSON and return import_id."""
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO imports (name, variant, source_name, sr_number, company, report_json)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            name,
            report.variant,
            source_name,
            report.sr_number,
            report.customer.company,
            json.dumps(report.to_json_dict()),
        ),
    )
    conn.commit()
    return cursor.lastrowid


def insert_time_entries(conn: sqlite3.Connection, import_id: int, entries: list) -> None:
    """Insert all time entries linked to import_id."""
    cursor = conn.cursor()
    for entry in entries:
        cursor.execute(
            """
            INSERT INTO time_entries (
                import_id, entry_date, onsite_start, onsite_end, lunch_duration,
                travel_to, travel_home, service_work
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                import_id,
                entry.date,
                entry.onsite.start,
                entry.onsite.end,
                entry.lunch_duration if entry.lunch else 0.0,
                f"{entry.travel_to.start}-{entry.travel_to.end}" if entry.travel_to.active else None,
                f"{entry.travel_home.start}-{entry.travel_home.end}" if entry.travel_home.active else None,
                entry.service_work,
            ),
        )
    conn.commit()


def save_extraction(
    conn: sqlite3.Connection, report, source_name: str | None = None, as_of_date: date | None = None
) -> tuple[int, str]:
    """
    Archive an extracted report and its entries.

    Returns:
        Tuple of (import_id, import_name)
    """
    name = generate_import_name(report.sr_number, as_of_date or date.today(), conn)
    import_id = create_import_record(conn, name, report, source_name)
    insert_time_entries(conn, import_id, report.time_entries)
    return import_id, name
