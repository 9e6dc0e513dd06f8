"""
PnL tracking for the engine.

Cash-flow accounting across both instruments. All values are integers in
minimum currency units.
"""

from dataclasses import dataclass, field

from ..types import Instrument, Side


@dataclass
class FillRecord:
    """Record of a single execution for PnL tracking."""
    ts: int
    instrument: Instrument
    side: Side
    size: int
    price: int
    order_id: int


@dataclass
class PnLTracker:
    """
    Tracks cash and holdings per instrument from executions.

    Buying pays cash, selling receives it. Fees are signed (negative is a
    rebate) and are subtracted from cash.
    """
    fills: list[FillRecord] = field(default_factory=list)

    cash: int = 0
    fees: int = 0
    holdings: dict[Instrument, int] = field(
        default_factory=lambda: {Instrument.REFERENCE: 0, Instrument.TRADABLE: 0}
    )

    def record_fill(
        self,
        ts: int,
        instrument: Instrument,
        side: Side,
        size: int,
        price: int,
        order_id: int,
    ) -> None:
        self.fills.append(FillRecord(ts, instrument, side, size, price, order_id))
        if side == Side.BUY:
            self.cash -= size * price
            self.holdings[instrument] += size
        else:
            self.cash += size * price
            self.holdings[instrument] -= size

    def record_fees(self, fees: int) -> None:
        self.fees += fees

    @property
    def fill_count(self) -> int:
        return len(self.fills)

    def mark_to_market(self, reference_mid: int, tradable_mid: int) -> int:
        """Cash plus holdings valued at the given mids, net of fees."""
        return (
            self.cash
            - self.fees
            + self.holdings[Instrument.REFERENCE] * reference_mid
            + self.holdings[Instrument.TRADABLE] * tradable_mid
        )
