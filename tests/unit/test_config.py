"""Tests for pool configuration."""

import pytest

from dex.config import DEFAULT_POOL_CONFIG, PoolConfig


class TestPoolConfig:
    def test_defaults(self):
        assert DEFAULT_POOL_CONFIG.fee_numerator == 997
        assert DEFAULT_POOL_CONFIG.fee_denominator == 1000
        assert DEFAULT_POOL_CONFIG.price_scale == 10**18
        assert DEFAULT_POOL_CONFIG.fee_bps == 30

    def test_frozen(self):
        """Fee parameters cannot be changed after construction."""
        with pytest.raises(AttributeError):
            DEFAULT_POOL_CONFIG.fee_numerator = 990  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"fee_denominator": 0},
            {"fee_numerator": 0},
            {"fee_numerator": 1001, "fee_denominator": 1000},
            {"price_scale": 0},
            {"event_history": 0},
        ],
    )
    def test_rejects_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            PoolConfig(**kwargs)

    def test_fee_bps(self):
        assert PoolConfig(fee_numerator=9975, fee_denominator=10000).fee_bps == 25
        assert PoolConfig(fee_numerator=1000, fee_denominator=1000).fee_bps == 0

    def test_from_env(self):
        config = PoolConfig.from_env(
            {"DEX_FEE_NUMERATOR": "9975", "DEX_FEE_DENOMINATOR": "10000", "DEX_PRICE_SCALE": "1000000"}
        )
        assert config == PoolConfig(fee_numerator=9975, fee_denominator=10000, price_scale=10**6)

    def test_from_env_event_history(self):
        assert PoolConfig.from_env({"DEX_EVENT_HISTORY": "50"}).event_history == 50

    def test_from_env_defaults(self):
        assert PoolConfig.from_env({}) == DEFAULT_POOL_CONFIG

    def test_from_env_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("DEX_FEE_NUMERATOR", "990")
        assert PoolConfig.from_env().fee_numerator == 990
