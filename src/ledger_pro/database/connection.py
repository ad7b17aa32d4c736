import sqlite3
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Generator

# Type alias for clarity
Connection = sqlite3.Connection

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

# Dates round-trip as ISO strings in DATE columns
sqlite3.register_adapter(date, date.isoformat)
sqlite3.register_converter("DATE", lambda raw: date.fromisoformat(raw.decode()))

class DatabaseConfig:
    """Database configuration settings."""

    def __init__(self, db_path: Path | str = "data/ledger.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def connection_string(self) -> str:
        """Return the database file path as a string"""
        return str(self.db_path.absolute())
    
def configure_connection(conn: Connection) -> None:
    """
    Apply standard configuration to a SQLite connection.
    
    Args:
        conn: SQLite connection to configure
    """
    # Enable foreign key constraints (OFF by default in SQLite!)
    conn.execute("PRAGMA foreign_keys = ON")
    
    # Return rows as dict-like objects instead of tuples
    conn.row_factory = sqlite3.Row
    
class DatabaseManager:
    """
    Manages the SQLite connection used by the ledger store.

    One connection is opened lazily and reused until close().
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._connection: Connection | None = None

    def get_connection(self) -> Connection:
        """
        Get or create a database connection.

        Returns:
            sqlite3.Connection: Active database connection
        """
        if self._connection is None:
            self._connection = self._create_connection()
        return self._connection
    
    def _create_connection(self) -> Connection:
        conn = sqlite3.connect(
            self.config.connection_string,
            detect_types=sqlite3.PARSE_DECLTYPES,
            check_same_thread=False,
        )
        configure_connection(conn)
        return conn
    
    def close(self) -> None:
        """Close the database connection if open."""
        if self._connection:
            self._connection.close()
            self._connection = None

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """
        Context manager for database transactions.

        Automatically commits on success, rolls back on exception.

        Usage: 
            with db_manager.transaction() as conn:
                conn.execute("INSERT INTO ...")
                conn.execute("UPDATE ...")
        """
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def __enter__(self) -> "DatabaseManager":
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

def execute_schema(conn: Connection, schema_path: Path = SCHEMA_PATH) -> None:
    """
    Execute a SQL schema file.

    Args:
        conn: Database connection
        schema_path: Path to .sql file, the bundled schema by default
    """
    with open(schema_path) as f:
        schema = f.read()

    conn.executescript(schema)
    conn.commit()
