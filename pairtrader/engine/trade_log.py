"""
Trade logging for the engine.

Logs fills and hedges to JSONL files for analysis and auditing.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class TradeLogger:
    """
    Logs fills and hedges to a JSON lines file.

    Each record is appended as one JSON line.
    """

    def __init__(self, output_dir: str = "trades"):
        """
        Initialize trade logger.

        Args:
            output_dir: Directory to store trade logs
        """
        self._output_dir = Path(output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self._filepath = self._output_dir / f"trades_{timestamp}.jsonl"
        self._file: Optional[object] = None

        try:
            self._file = open(self._filepath, "a")
            logger.info(f"Trade log: {self._filepath}")
        except OSError as e:
            logger.error(f"Failed to open trade log: {e}")

    @property
    def filepath(self) -> Path:
        return self._filepath

    def log_fill(
        self,
        ts: int,
        side: str,
        size: int,
        price: int,
        order_id: int,
        position: int,
        hedge_order_id: int,
        hedge_price: int,
    ) -> None:
        """Log a tradable fill together with the hedge it triggered."""
        self._write({
            "kind": "fill",
            "ts": ts,
            "side": side,
            "size": size,
            "price": price,
            "order_id": order_id,
            "position": position,
            "hedge": {"order_id": hedge_order_id, "price": hedge_price},
        })

    def log_hedge_fill(self, ts: int, size: int, price: int, order_id: int) -> None:
        """Log a hedge execution on the reference instrument."""
        self._write({
            "kind": "hedge_fill",
            "ts": ts,
            "size": size,
            "price": price,
            "order_id": order_id,
        })

    def _write(self, record: dict) -> None:
        if not self._file:
            return
        try:
            self._file.write(json.dumps(record) + "\n")
            self._file.flush()  # Ensure immediate write
        except OSError as e:
            logger.error(f"Failed to log trade: {e}")

    def close(self) -> None:
        """Close the trade log file."""
        if self._file:
            try:
                self._file.close()
                logger.info(f"Trade log closed: {self._filepath}")
            except OSError as e:
                logger.error(f"Failed to close trade log: {e}")
            finally:
                self._file = None
