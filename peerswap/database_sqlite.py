"""
SQLite Database Adapter for PeerSwap

Holds the durable order status ledger.  One row per order that left OPEN;
rows are never updated or deleted.
"""
import aiosqlite
import os
from typing import Optional
from .logger import get_logger

logger = get_logger(__name__)


class DatabaseSQLite:
    """SQLite database for order status"""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.connection: Optional[aiosqlite.Connection] = None

    @staticmethod
    async def create(db_path: str, wal_mode: bool = True, **kwargs):
        """Create and initialize SQLite database"""
        self = DatabaseSQLite(db_path)

        # Ensure directory exists
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # Open connection
        self.connection = await aiosqlite.connect(db_path, **kwargs)
        self.connection.row_factory = aiosqlite.Row

        if wal_mode and db_path != ":memory:":
            await self.connection.execute("PRAGMA journal_mode=WAL")
            await self.connection.execute("PRAGMA synchronous=NORMAL")

        # Initialize schema
        await self._init_schema()

        logger.info(f"SQLite database initialized: {db_path}")
        return self

    @staticmethod
    async def from_config(config):
        """Open the database named by a `PeerSwapConfig`."""
        sqlite = config.database.sqlite
        return await DatabaseSQLite.create(sqlite.path, wal_mode=sqlite.wal_mode)

    async def _init_schema(self):
        """Initialize database schema"""
        schema = """
        CREATE TABLE IF NOT EXISTS order_status (
            maker TEXT NOT NULL,
            order_hash TEXT NOT NULL,
            status INTEGER NOT NULL CHECK (status IN (1, 2)),
            updated_at INTEGER NOT NULL,
            PRIMARY KEY (maker, order_hash)
        );

        CREATE INDEX IF NOT EXISTS idx_order_status_maker ON order_status(maker);
        """
        await self.connection.executescript(schema)
        await self.connection.commit()

    async def close(self):
        """Close database connection"""
        if self.connection:
            await self.connection.close()
            self.connection = None
            logger.info(f"SQLite database closed: {self.db_path}")
