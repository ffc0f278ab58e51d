"""
Device directory: SQLite persistence for commissioned devices.

Node IDs are allocated as MAX(existing)+1, but the read and the write happen
in a single INSERT ... SELECT under BEGIN IMMEDIATE, and the reservation
table's primary key rejects duplicates. Concurrent commissions therefore
never share a node ID. A reservation lives until the device row is written
(same transaction) or the commission fails and it is released.
"""

import json
import logging
import sqlite3
import time
from contextlib import closing
from typing import List, Optional

from .errors import DeviceNotFound, PersistenceError
from .models import Capabilities, Device

logger = logging.getLogger("gateway.device_store")

DB_PATH = "gateway.db"
BUSY_TIMEOUT = 30.0  # seconds to wait for another writer's lock
MAX_ALLOCATION_ATTEMPTS = 5

SCHEMA = """
    CREATE TABLE IF NOT EXISTS devices (
        id           INTEGER PRIMARY KEY,
        node_id      INTEGER NOT NULL UNIQUE,
        endpoint_id  INTEGER NOT NULL,
        device_type  VARCHAR(50) NOT NULL DEFAULT 'unknown',
        name         VARCHAR(100) NOT NULL,
        capabilities TEXT NOT NULL DEFAULT '{}'
    );
    CREATE TABLE IF NOT EXISTS node_reservations (
        node_id INTEGER PRIMARY KEY,
        created INTEGER NOT NULL
    );
"""


class DeviceStore:
    """
    Device records keyed by node ID.

    Every method opens its own connection, so a store can be shared across
    threads and concurrent requests.
    """

    def __init__(self, db_path: str = DB_PATH, busy_timeout: float = BUSY_TIMEOUT):
        self.db_path = db_path
        self.busy_timeout = busy_timeout

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode: transactions are opened explicitly with BEGIN IMMEDIATE
        conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def init_tables(self):
        """Create tables if they don't exist."""
        try:
            with closing(self._connect()) as conn:
                conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to initialise database '{self.db_path}': {e}") from e
        logger.info(f"Device store ready ({self.db_path})")

    # =========================================================================
    # NODE ID ALLOCATION
    # =========================================================================

    def reserve_node_id(self) -> int:
        """Atomically allocate the next free node ID."""
        for attempt in range(1, MAX_ALLOCATION_ATTEMPTS + 1):
            try:
                with closing(self._connect()) as conn:
                    conn.execute("BEGIN IMMEDIATE")
                    try:
                        conn.execute(
                            """
                            INSERT INTO node_reservations (node_id, created)
                            SELECT COALESCE(MAX(node_id), 0) + 1, ? FROM (
                                SELECT node_id FROM devices
                                UNION ALL
                                SELECT node_id FROM node_reservations
                            )
                            """,
                            (int(time.time()),)
                        )
                        node_id = conn.execute("SELECT MAX(node_id) FROM node_reservations").fetchone()[0]
                        conn.execute("COMMIT")
                    except BaseException:
                        conn.execute("ROLLBACK")
                        raise
                logger.debug(f"Reserved node id {node_id}")
                return node_id
            except sqlite3.IntegrityError as e:
                logger.warning(f"Node id allocation conflict (attempt {attempt}/{MAX_ALLOCATION_ATTEMPTS}): {e}")
            except sqlite3.Error as e:
                raise PersistenceError(f"Database error: {e}") from e

        raise PersistenceError(f"Could not allocate a node id after {MAX_ALLOCATION_ATTEMPTS} attempts")

    def release_node_id(self, node_id: int):
        """Drop a reservation whose commission failed."""
        try:
            with closing(self._connect()) as conn:
                conn.execute("DELETE FROM node_reservations WHERE node_id = ?", (node_id,))
        except sqlite3.Error as e:
            raise PersistenceError(f"Database error: {e}") from e
        logger.debug(f"Released node id {node_id}")

    # =========================================================================
    # DEVICES
    # =========================================================================

    def add_device(self, node_id: int, endpoint_id: int, name: str,
                   capabilities: Capabilities, device_type: str = "unknown") -> Device:
        """Insert a commissioned device and consume its reservation."""
        try:
            with closing(self._connect()) as conn:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    cursor = conn.execute(
                        "INSERT INTO devices (node_id, endpoint_id, device_type, name, capabilities) "
                        "VALUES (?, ?, ?, ?, ?)",
                        (node_id, endpoint_id, device_type, name, json.dumps(capabilities))
                    )
                    conn.execute("DELETE FROM node_reservations WHERE node_id = ?", (node_id,))
                    conn.execute("COMMIT")
                except BaseException:
                    conn.execute("ROLLBACK")
                    raise
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to insert device into database: {e}") from e

        logger.info(f"Stored device '{name}' (node {node_id}, endpoint {endpoint_id})")
        return Device(
            id=cursor.lastrowid,
            node_id=node_id,
            endpoint_id=endpoint_id,
            name=name,
            device_type=device_type,
            capabilities={cluster: list(cmds) for cluster, cmds in capabilities.items()},
        )

    def get_device(self, node_id: int, endpoint_id: Optional[int] = None) -> Device:
        """Raises DeviceNotFound if no device matches."""
        query = "SELECT * FROM devices WHERE node_id = ?"
        params = [node_id]
        if endpoint_id is not None:
            query += " AND endpoint_id = ?"
            params.append(endpoint_id)

        try:
            with closing(self._connect()) as conn:
                row = conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Database error: {e}") from e

        if row is None:
            raise DeviceNotFound(node_id, endpoint_id)
        return self._row_to_device(row)

    def list_devices(self) -> List[Device]:
        try:
            with closing(self._connect()) as conn:
                rows = conn.execute("SELECT * FROM devices ORDER BY node_id ASC").fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Database error: {e}") from e
        return [self._row_to_device(r) for r in rows]

    @staticmethod
    def _row_to_device(row: sqlite3.Row) -> Device:
        try:
            capabilities = json.loads(row["capabilities"] or "{}")
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupt capabilities for node {row['node_id']}: {e}") from e
        return Device(
            id=row["id"],
            node_id=row["node_id"],
            endpoint_id=row["endpoint_id"],
            name=row["name"],
            device_type=row["device_type"],
            capabilities=capabilities,
        )
