#!/usr/bin/env python3
"""
测试配置 (config.py)
"""

import pytest

from core.exceptions import ConfigError
from utils.config import DEFAULT_API_BASE_URL, CommitmentLevel, DemoConfig, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """隔离 .env 和环境变量"""
    monkeypatch.chdir(tmp_path)
    for name in ("X_TENSOR_API_KEY", "API_BASE_URL", "RPC_URL", "COMMITMENT", "LOG_LEVEL", "TICK_SIZE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = DemoConfig()

    assert config.api_base_url == DEFAULT_API_BASE_URL
    assert config.api_timeout_seconds == 5.0
    assert config.commitment == CommitmentLevel.CONFIRMED
    assert config.listing_settle_seconds == 2.0

    params = config.get_market_params()
    assert (params.taker_fee_bps, params.min_order_size, params.tick_size) == (100, 1, 0.01)


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("X_TENSOR_API_KEY", "secret")
    monkeypatch.setenv("API_BASE_URL", "http://localhost:8080/api")
    monkeypatch.setenv("COMMITMENT", "finalized")

    config = DemoConfig()

    assert config.require_api_key() == "secret"
    assert config.api_base_url == "http://localhost:8080/api/"
    assert config.commitment == CommitmentLevel.FINALIZED


def test_reads_env_file(tmp_path):
    env_file = tmp_path / "demo.env"
    env_file.write_text("X_TENSOR_API_KEY=from-file\nTICK_SIZE=0.5\n")

    config = load_config(env_file)

    assert config.api_key == "from-file"
    assert config.tick_size == 0.5


def test_missing_api_key():
    with pytest.raises(ConfigError):
        DemoConfig().require_api_key()


def test_summary_hides_api_key(monkeypatch):
    monkeypatch.setenv("X_TENSOR_API_KEY", "super-secret")
    assert "super-secret" not in DemoConfig().get_summary()


def test_invalid_value(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ConfigError):
        load_config()


def test_missing_env_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.env")
