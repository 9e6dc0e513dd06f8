"""
Outbound command types.

Commands are produced by the engine and handed to the Gateway collaborator.
"""

from dataclasses import dataclass

from .core import Side, Lifespan, CommandType


@dataclass(frozen=True, slots=True)
class InsertOrder:
    """Insert a resting order on the tradable instrument."""
    order_id: int
    side: Side
    price: int
    size: int
    lifespan: Lifespan

    @property
    def command_type(self) -> CommandType:
        return CommandType.INSERT


@dataclass(frozen=True, slots=True)
class CancelOrder:
    """Cancel a previously inserted order."""
    order_id: int

    @property
    def command_type(self) -> CommandType:
        return CommandType.CANCEL


@dataclass(frozen=True, slots=True)
class HedgeOrder:
    """
    Aggressive order on the reference instrument.

    Priced at the worst acceptable price so it fills immediately.
    """
    order_id: int
    side: Side
    price: int
    size: int

    @property
    def command_type(self) -> CommandType:
        return CommandType.HEDGE


Command = InsertOrder | CancelOrder | HedgeOrder
