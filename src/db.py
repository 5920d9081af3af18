"""
Project Store - PostgreSQL persistence for local project records.

Records are keyed by an address chosen by the caller (for example
``projects.docs``) and hold both desired fields and the last observed
snapshot.
"""

import json
import logging
from typing import List, Optional

import asyncpg

from records import ProjectRecord

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS project_records (
    address VARCHAR(255) PRIMARY KEY,
    name VARCHAR(255) NOT NULL DEFAULT '',
    space_name VARCHAR(255) NOT NULL,
    display_name VARCHAR(255) NOT NULL,
    description TEXT,
    observed JSONB NOT NULL DEFAULT '{}',
    created_at TIMESTAMP NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMP NOT NULL DEFAULT NOW()
)
"""


class ProjectStore:
    """Manages PostgreSQL storage of project records."""

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        min_pool_size: int = 1,
        max_pool_size: int = 10,
    ):
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Establish connection pool to PostgreSQL."""
        self.pool = await asyncpg.create_pool(
            host=self.host,
            port=self.port,
            database=self.database,
            user=self.user,
            password=self.password,
            min_size=self.min_pool_size,
            max_size=self.max_pool_size,
            command_timeout=60,
        )
        logger.info(
            f"Connected to PostgreSQL (pool: {self.min_pool_size}-{self.max_pool_size})"
        )

    async def close(self):
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            logger.info("Closed PostgreSQL connection")

    def _ensure_connected(self) -> None:
        if self.pool is None:
            raise RuntimeError(
                "Database not connected. Call connect() before performing operations."
            )

    async def initialize_schema(self) -> None:
        """Create the project_records table if it does not exist."""
        self._ensure_connected()
        async with self.pool.acquire() as conn:
            await conn.execute(SCHEMA_SQL)
        logger.info("Database schema initialized")

    async def save(self, address: str, record: ProjectRecord) -> None:
        """
        Insert or replace the record stored at an address.

        Args:
            address: Caller-chosen key for the record.
            record: The record to persist.
        """
        self._ensure_connected()
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO project_records
                    (address, name, space_name, display_name, description, observed)
                VALUES ($1, $2, $3, $4, $5, $6)
                ON CONFLICT (address) DO UPDATE SET
                    name = EXCLUDED.name,
                    space_name = EXCLUDED.space_name,
                    display_name = EXCLUDED.display_name,
                    description = EXCLUDED.description,
                    observed = EXCLUDED.observed,
                    updated_at = NOW()
                """,
                address,
                record.name,
                record.space_name,
                record.display_name,
                record.description,
                json.dumps(record.observed),
            )
        logger.debug(f"Saved project record {address} (name={record.name!r})")

    async def load(self, address: str) -> Optional[ProjectRecord]:
        """Load the record stored at an address, or None."""
        self._ensure_connected()
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT name, space_name, display_name, description, observed
                FROM project_records WHERE address = $1
                """,
                address,
            )

        if row is None:
            return None
        return self._parse_row(row)

    async def delete(self, address: str) -> bool:
        """Forget the record at an address. Returns True if one was removed."""
        self._ensure_connected()
        async with self.pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM project_records WHERE address = $1", address
            )

        deleted = result == "DELETE 1"
        if deleted:
            logger.info(f"Removed project record {address}")
        return deleted

    async def list_addresses(self) -> List[str]:
        """List all stored record addresses in order."""
        self._ensure_connected()
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT address FROM project_records ORDER BY address"
            )
        return [row["address"] for row in rows]

    def _parse_row(self, row: asyncpg.Record) -> ProjectRecord:
        data = dict(row)
        observed = data.get("observed")
        if isinstance(observed, str):
            data["observed"] = json.loads(observed) if observed else {}
        return ProjectRecord.from_dict(data)
