"""Shared fixtures for the vrating test suite."""

from __future__ import annotations

import pytest

from vrating.core.config import CapitalConfig, RatingSettings


@pytest.fixture
def settings() -> RatingSettings:
    """Default settings."""
    return RatingSettings()


@pytest.fixture
def funded_settings() -> RatingSettings:
    """Settings for an account that started with 10,000 of capital."""
    return RatingSettings(capital=CapitalConfig(starting_balance=10_000.0))
