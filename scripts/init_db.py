#!/usr/bin/env python3
"""
Initialize the ledger database.

Run this script to create the database schema.
"""
from ledger_pro.config.settings import LedgerSettings
from ledger_pro.database.connection import DatabaseConfig, DatabaseManager, execute_schema

def main():
    """Initialize the database."""
    settings = LedgerSettings.load()
    config = DatabaseConfig(settings.database_path)
    print(f"Initializing database at: {config.db_path}")

    with DatabaseManager(config) as db:
        conn = db.get_connection()
        execute_schema(conn)

        cursor = conn.execute(
            "SELECT version, description FROM schema_version ORDER BY version DESC LIMIT 1"
        )
        row = cursor.fetchone()

        if row:
            print(f"✓ Database initialized successfully!")
            print(f"  Schema version: {row['version']}")
            print(f"  Description: {row['description']}")
        else:
            print("✗ Database initialization may have failed")

if __name__ == "__main__":
    main()
