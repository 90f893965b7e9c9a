"""SQLite candle store for groww-ta."""

import logging
import sqlite3
from pathlib import Path

from growwta.models import Candle, CandleSeries
from growwta.providers.base import MarketDataProvider

logger = logging.getLogger(__name__)


class CandleStore(MarketDataProvider):
    """SQLite-backed candle cache that serves as a market-data provider.

    Only raw candles are stored; computed indicators are never persisted.
    """

    def __init__(self, db_path: Path):
        """Initialize the candle store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS candles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    symbol TEXT NOT NULL,
                    exchange TEXT NOT NULL,
                    segment TEXT NOT NULL,
                    interval INTEGER NOT NULL,
                    timestamp INTEGER NOT NULL,
                    open REAL NOT NULL,
                    high REAL NOT NULL,
                    low REAL NOT NULL,
                    close REAL NOT NULL,
                    volume INTEGER NOT NULL,
                    UNIQUE(symbol, exchange, segment, interval, timestamp)
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def save_candles(
        self,
        symbol: str,
        series: CandleSeries,
        exchange: str = "NSE",
        segment: str = "CASH",
    ) -> int:
        """Save a candle series, replacing candles with the same timestamp.

        Args:
            symbol: Trading symbol.
            series: Candles to save; the series interval is the storage key.
            exchange: Exchange code.
            segment: Market segment.

        Returns:
            Number of candles written.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.executemany(
                """
                INSERT OR REPLACE INTO candles
                (symbol, exchange, segment, interval, timestamp, open, high, low, close, volume)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        symbol.upper(),
                        exchange.upper(),
                        segment.upper(),
                        series.interval,
                        candle.timestamp,
                        candle.open,
                        candle.high,
                        candle.low,
                        candle.close,
                        candle.volume,
                    )
                    for candle in series.candles
                ],
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Saved %d %d-minute candles for %s", len(series), series.interval, symbol.upper())
        return len(series)

    def get_candles(
        self,
        symbol: str,
        interval: int,
        start_time: int,
        end_time: int,
        exchange: str = "NSE",
        segment: str = "CASH",
    ) -> CandleSeries:
        """Get stored candles for a time range, oldest first."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT timestamp, open, high, low, close, volume
                FROM candles
                WHERE symbol = ? AND exchange = ? AND segment = ? AND interval = ?
                  AND timestamp >= ? AND timestamp <= ?
                ORDER BY timestamp ASC
                """,
                (symbol.upper(), exchange.upper(), segment.upper(), interval, start_time, end_time),
            )
            rows = cursor.fetchall()
        finally:
            conn.close()

        logger.debug("Loaded %d %d-minute candles for %s", len(rows), interval, symbol.upper())
        return CandleSeries(
            interval=interval,
            candles=tuple(
                Candle(
                    timestamp=row["timestamp"],
                    open=row["open"],
                    high=row["high"],
                    low=row["low"],
                    close=row["close"],
                    volume=row["volume"],
                )
                for row in rows
            ),
        )

    def count_candles(
        self,
        symbol: str,
        interval: int,
        exchange: str = "NSE",
        segment: str = "CASH",
    ) -> int:
        """Count stored candles for a symbol and interval."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT COUNT(*) AS n FROM candles
                WHERE symbol = ? AND exchange = ? AND segment = ? AND interval = ?
                """,
                (symbol.upper(), exchange.upper(), segment.upper(), interval),
            )
            return cursor.fetchone()["n"]
        finally:
            conn.close()
