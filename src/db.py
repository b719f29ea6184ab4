"""Shared SQLite helpers — WAL mode, busy timeout."""

import sqlite3
from pathlib import Path


def wal_connect(db_path: str | Path, timeout: float = 5.0) -> sqlite3.Connection:
    """Open SQLite connection with WAL journal mode.

    Args:
        db_path: Path to database file. Parent directory is created if missing.
        timeout: Seconds to wait on a locked database before failing.
    """
    path = Path(db_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), timeout=timeout)
    conn.execute("PRAGMA journal_mode=WAL")
    return conn
