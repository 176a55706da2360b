"""Shared fixtures for journal tests."""

import pytest
from datetime import date, timedelta
from typing import Any

from vrating.journal.normalizer import normalize


def make_trade(
    pnl: Any = 50.0,
    trade_date: Any = "2024-01-02",
    quantity: Any = 1.0,
    entry_price: Any = 100.0,
    entry_time: Any = "09:00",
    exit_time: Any = "21:00",
    emotional_state: Any = ("DISCIPLINE",),
    strategy_id: str | None = "breakout",
    notes: str | None = "Followed the plan",
    **extra: Any,
) -> dict[str, Any]:
    """Helper to create a raw journal row (12h hold, fully journaled)."""
    row = {
        "symbol": "AAPL",
        "side": "long",
        "pnl": pnl,
        "trade_date": trade_date,
        "quantity": quantity,
        "entry_price": entry_price,
        "entry_time": entry_time,
        "exit_time": exit_time,
        "emotional_state": (
            list(emotional_state) if isinstance(emotional_state, tuple) else emotional_state
        ),
        "strategy_id": strategy_id,
        "notes": notes,
    }
    row.update(extra)
    return row


def make_series(
    pnls: list[float],
    start: date = date(2024, 1, 1),
    quantities: list[float] | None = None,
    emotions: list[Any] | None = None,
    **kwargs: Any,
) -> list[dict[str, Any]]:
    """One trade per day from ``start``; quantities/emotions cycle if shorter."""
    rows = []
    for i, pnl in enumerate(pnls):
        row_kwargs = dict(kwargs)
        if quantities:
            row_kwargs["quantity"] = quantities[i % len(quantities)]
        if emotions:
            row_kwargs["emotional_state"] = emotions[i % len(emotions)]
        rows.append(
            make_trade(
                pnl=pnl,
                trade_date=(start + timedelta(days=i)).isoformat(),
                **row_kwargs,
            )
        )
    return rows


def all_wins_rows() -> list[dict[str, Any]]:
    """20 trades, every one +50, in a single month."""
    return make_series([50.0] * 20)


def alternating_rows() -> list[dict[str, Any]]:
    """20 trades alternating +100/-120, erratic sizing, 30-minute holds."""
    return make_series(
        [100.0, -120.0] * 10,
        quantities=[50.0, 350.0],
        entry_time="10:00",
        exit_time="10:30",
    )


def good_risk_rows() -> list[dict[str, Any]]:
    """Shallow drawdown, no large losses, steady sizing, 18h overnight holds."""
    return make_series(
        [500.0] + [100.0, -50.0] * 4 + [100.0],
        quantities=[10.0, 12.0],
        entry_time="09:00",
        exit_time="03:00",
    )


def bad_risk_rows() -> list[dict[str, Any]]:
    """Deep drawdown, a 12-trade loss streak, erratic sizing."""
    return make_series(
        [200.0] + [-30.0] * 12,
        quantities=[50.0, 350.0],
        entry_time="10:00",
        exit_time="12:00",
    )


@pytest.fixture
def all_wins():
    return all_wins_rows()


@pytest.fixture
def alternating():
    return alternating_rows()


@pytest.fixture
def good_risk():
    return good_risk_rows()


@pytest.fixture
def bad_risk():
    return bad_risk_rows()


@pytest.fixture
def normalized_all_wins():
    return normalize(all_wins_rows())


@pytest.fixture
def normalized_alternating():
    return normalize(alternating_rows())
