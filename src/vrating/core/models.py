"""Trade records consumed by the rating engine.

``Trade`` is the journal's raw record exactly as the surrounding
application stores it: every field is optional and lenient, because
historical rows come in several shapes.  ``NormalizedTrade`` is what the
extractors work on: a guaranteed-finite P&L, numeric sizing, a parsed
trade date, a canonical emotion tag tuple and a derived holding duration.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, field_validator


class Trade(BaseModel):
    """A single journal entry as logged by the user."""

    model_config = {"extra": "ignore"}

    # Identity
    id: Any = None
    symbol: str | None = None
    side: str | None = None  # "long"/"short" or "buy"/"sell"
    market: str | None = None

    # Sizing and outcome (validated by the normalizer, not here)
    quantity: Any = None
    entry_price: Any = None
    exit_price: Any = None
    pnl: Any = None

    # Timing
    trade_date: Any = None
    entry_time: Any = None
    exit_time: Any = None

    # Journaling
    emotional_state: Any = None
    strategy_id: str | None = None
    strategies: Any = None  # Joined strategy row, if the caller attached one
    notes: str | None = None

    @field_validator("symbol", "side", "market", "strategy_id", "notes", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @property
    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())

    @property
    def has_strategy(self) -> bool:
        if self.strategy_id and self.strategy_id.strip():
            return True
        if isinstance(self.strategies, dict):
            return len(self.strategies) > 0
        return bool(self.strategies)


class NormalizedTrade(BaseModel):
    """A trade that carries a realized P&L, ready for metric extraction."""

    model_config = {"frozen": True}

    trade: Trade
    pnl: float
    quantity: float = 0.0
    entry_price: float = 0.0
    trade_date: date | None = None
    emotions: tuple[str, ...] = ()
    duration_hours: float | None = None

    @property
    def notional(self) -> float:
        """Position notional (quantity * entry price); 0 when unknown."""
        if self.quantity <= 0 or self.entry_price <= 0:
            return 0.0
        return self.quantity * self.entry_price

    @property
    def is_win(self) -> bool:
        return self.pnl > 0

    @property
    def is_loss(self) -> bool:
        return self.pnl < 0

    @property
    def month(self) -> str | None:
        """Calendar bucket ``YYYY-MM``, or ``None`` when undated."""
        if self.trade_date is None:
            return None
        return f"{self.trade_date.year:04d}-{self.trade_date.month:02d}"
