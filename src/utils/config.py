#!/usr/bin/env python3
"""
基于 Pydantic 的配置管理系统
- 自动类型验证和转换
- 自动从环境变量和 .env 读取
"""

import logging
from typing import Optional
from pathlib import Path
from enum import Enum

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import ConfigError
from core.types import MarketParams

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://api.devnet.tensordev.io/api/v1/sft/"
DEFAULT_RPC_URL = "http://api.devnet.solana.com"


class CommitmentLevel(str, Enum):
    """RPC commitment"""
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"


class DemoConfig(BaseSettings):
    """
    演示客户端配置

    环境变量优先级高于 .env 文件
    """

    # SFT API
    api_key: str = Field(default="", alias="X_TENSOR_API_KEY")
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, alias="API_BASE_URL")
    api_timeout_seconds: float = Field(default=5.0, gt=0, alias="API_TIMEOUT_SECONDS")

    # RPC
    rpc_url: str = Field(default=DEFAULT_RPC_URL, alias="RPC_URL")
    commitment: CommitmentLevel = Field(default=CommitmentLevel.CONFIRMED, alias="COMMITMENT")

    # 本地状态（密钥文件和 market.json 所在目录）
    state_dir: Path = Field(default=Path("."), alias="STATE_DIR")

    # 挂单后等待 API 索引的时间
    listing_settle_seconds: float = Field(default=2.0, ge=0, alias="LISTING_SETTLE_SECONDS")

    # 测试市场参数
    taker_fee_bps: int = Field(default=100, ge=0, le=10_000, alias="TAKER_FEE_BPS")
    min_order_size: int = Field(default=1, ge=1, alias="MIN_ORDER_SIZE")
    tick_size: float = Field(default=0.01, gt=0, alias="TICK_SIZE")

    # 日志
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
        populate_by_name=True,
    )

    @field_validator('api_base_url')
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """httpx 的 base_url 需要以 / 结尾才能拼接相对路径"""
        return v if v.endswith("/") else v + "/"

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    def require_api_key(self) -> str:
        """调用 API 前检查 key"""
        if not self.api_key:
            raise ConfigError("X_TENSOR_API_KEY is not set", {"env": "X_TENSOR_API_KEY"})
        return self.api_key

    def get_market_params(self) -> MarketParams:
        return MarketParams(
            taker_fee_bps=self.taker_fee_bps,
            min_order_size=self.min_order_size,
            tick_size=self.tick_size,
        )

    def get_summary(self) -> str:
        """获取配置摘要（不包含 API key）"""
        lines = [
            "=" * 60,
            "Configuration Summary",
            "=" * 60,
            f"API: {self.api_base_url} (key: {'set' if self.api_key else 'MISSING'})",
            f"RPC: {self.rpc_url} ({self.commitment.value})",
            f"State dir: {self.state_dir}",
            f"Market params: fee={self.taker_fee_bps}bps min_size={self.min_order_size} tick={self.tick_size}",
            "=" * 60,
        ]
        return "\n".join(lines)


def load_config(env_file: Optional[Path] = None) -> DemoConfig:
    """
    加载配置

    Args:
        env_file: .env 文件路径（可选）

    Returns:
        验证后的配置对象
    """
    if env_file and not Path(env_file).exists():
        raise ConfigError(f"Env file not found: {env_file}")

    try:
        if env_file:
            return DemoConfig(_env_file=env_file)
        return DemoConfig()
    except ValidationError as e:
        raise ConfigError("Invalid configuration", {"errors": e.errors(include_url=False)}) from e
