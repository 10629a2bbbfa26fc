"""Trade persistence layer for audit trails and history replay."""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from ..errors import PersistenceError
from ..ledger.models import Trade, TradeState
from ..models.trading import Direction, TradeSource
from ..utils.time import format_timestamp, utc_now


class TradeStore:
    """SQLite-based trade persistence layer.

    Rows are upserted on placement and again on settlement, so the table
    always holds the latest state of every trade.
    """

    def __init__(self, db_path: Union[str, Path] = "trades.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger("trade.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    trade_id TEXT PRIMARY KEY,
                    placed_at TEXT NOT NULL,
                    pair TEXT NOT NULL,
                    direction TEXT NOT NULL,
                    amount TEXT NOT NULL,
                    duration_seconds INTEGER NOT NULL,
                    source TEXT NOT NULL,
                    source_label TEXT,
                    state TEXT NOT NULL,
                    payout TEXT,
                    settled_at TEXT,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_trades_state ON trades(state)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_trades_placed_at ON trades(placed_at)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection, wrapping driver errors in PersistenceError."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", error=str(e), db_path=str(self.db_path))
            raise PersistenceError(str(e), operation="sqlite", target=str(self.db_path)) from e
        finally:
            if conn:
                conn.close()

    def save_trade(self, trade: Trade) -> None:
        """
        Insert or update a trade row.

        Args:
            trade: Trade snapshot to persist

        Raises:
            PersistenceError: If the write fails
        """
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO trades (
                        trade_id, placed_at, pair, direction, amount,
                        duration_seconds, source, source_label, state,
                        payout, settled_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT (trade_id) DO UPDATE SET
                        state = excluded.state,
                        payout = excluded.payout,
                        settled_at = excluded.settled_at,
                        updated_at = excluded.updated_at
                """, (
                    trade.trade_id,
                    format_timestamp(trade.placed_at),
                    trade.pair,
                    trade.direction.value,
                    str(trade.amount),
                    trade.duration_seconds,
                    trade.source.value,
                    trade.source_label,
                    trade.state.value,
                    str(trade.payout) if trade.payout is not None else None,
                    format_timestamp(trade.settled_at) if trade.settled_at else None,
                    format_timestamp(utc_now()),
                ))
                conn.commit()

        self.logger.debug("Trade stored", trade_id=trade.trade_id, state=trade.state.value)

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        """Get a trade by ID."""
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT * FROM trades WHERE trade_id = ?
            """, (trade_id,)).fetchone()

            return self._row_to_trade(row) if row else None

    def get_trades(self, state: Optional[TradeState] = None, limit: int = 1000) -> list[Trade]:
        """Get trades, most recent first, optionally filtered by state."""
        with self._get_connection() as conn:
            if state is None:
                rows = conn.execute("""
                    SELECT * FROM trades ORDER BY placed_at DESC LIMIT ?
                """, (limit,)).fetchall()
            else:
                rows = conn.execute("""
                    SELECT * FROM trades WHERE state = ?
                    ORDER BY placed_at DESC LIMIT ?
                """, (state.value, limit)).fetchall()

            return [self._row_to_trade(row) for row in rows]

    def get_stats(self) -> dict[str, Any]:
        """Get database statistics."""
        with self._get_connection() as conn:
            total_count = conn.execute("SELECT COUNT(*) FROM trades").fetchone()[0]

            state_counts = {}
            for row in conn.execute("""
                SELECT state, COUNT(*) as count FROM trades GROUP BY state
            """):
                state_counts[row[0]] = row[1]

            return {
                "total_trades": total_count,
                "trades_by_state": state_counts,
            }

    def _row_to_trade(self, row: sqlite3.Row) -> Trade:
        """Convert database row to Trade object."""
        return Trade(
            trade_id=row["trade_id"],
            placed_at=datetime.fromisoformat(row["placed_at"]),
            pair=row["pair"],
            direction=Direction(row["direction"]),
            amount=Decimal(row["amount"]),
            duration_seconds=row["duration_seconds"],
            source=TradeSource(row["source"]),
            source_label=row["source_label"],
            state=TradeState(row["state"]),
            payout=Decimal(row["payout"]) if row["payout"] is not None else None,
            settled_at=datetime.fromisoformat(row["settled_at"]) if row["settled_at"] else None,
        )
