#!/usr/bin/env python3
"""
状态存储 - 密钥和市场配置

两种实现：
- FileStateStore: 每个条目一个 JSON 文件（<name>.json）
- MemoryStateStore: 纯内存，测试用

文件写入是直接覆盖：无锁、无原子写，截断的文件按原样解析并报错
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Union

from solders.keypair import Keypair

from core.exceptions import StateError
from core.types import Keypairs, MarketConfig

logger = logging.getLogger(__name__)

# 文件名（不含 .json）
PAYER = "payer"
MAKER = "maker"
TRADER = "trader"
MARKET_AUTHORITY = "marketAuthority"
MINT_AUTHORITY = "mintAuthority"
MARKET = "market"

ROLE_NAMES = (PAYER, MAKER, TRADER, MARKET_AUTHORITY)

SECRET_KEY_LENGTH = 64


def keypair_from_secret(name: str, secret: object) -> Keypair:
    """从 JSON 字节数组恢复密钥"""
    if not isinstance(secret, list) or len(secret) != SECRET_KEY_LENGTH:
        raise StateError(name, f"expected a JSON array of {SECRET_KEY_LENGTH} bytes")
    if not all(isinstance(b, int) and 0 <= b <= 255 for b in secret):
        raise StateError(name, "secret key must contain integers in 0..255")

    try:
        return Keypair.from_bytes(bytes(secret))
    except ValueError as e:
        raise StateError(name, str(e)) from e


def keypair_to_secret(keypair: Keypair) -> List[int]:
    return list(bytes(keypair))


def market_config_from_dict(name: str, data: object) -> MarketConfig:
    if not isinstance(data, dict):
        raise StateError(name, "expected a JSON object")
    try:
        return MarketConfig.from_dict(data)
    except KeyError as e:
        raise StateError(name, f"missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise StateError(name, f"invalid public key: {e}") from e


class StateStore(ABC):
    """密钥 / 市场配置仓库接口"""

    @abstractmethod
    def load_keypair(self, name: str) -> Keypair:
        pass

    @abstractmethod
    def save_keypair(self, name: str, keypair: Keypair):
        pass

    @abstractmethod
    def load_market_config(self) -> MarketConfig:
        pass

    @abstractmethod
    def save_market_config(self, config: MarketConfig):
        pass

    def load_keypairs(self) -> Keypairs:
        """加载四个角色的密钥"""
        return Keypairs(
            payer=self.load_keypair(PAYER),
            maker=self.load_keypair(MAKER),
            trader=self.load_keypair(TRADER),
            market_authority=self.load_keypair(MARKET_AUTHORITY),
        )


class FileStateStore(StateStore):
    """基于 JSON 文件的状态存储"""

    def __init__(self, directory: Union[str, Path] = "."):
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def _read_json(self, name: str):
        path = self.path_for(name)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise StateError(str(path), "file not found") from e

        try:
            return json.loads(text)
        except ValueError as e:
            raise StateError(str(path), f"invalid JSON: {e}") from e

    def _write_json(self, name: str, data):
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        logger.debug(f"State written: {path}")

    def load_keypair(self, name: str) -> Keypair:
        return keypair_from_secret(str(self.path_for(name)), self._read_json(name))

    def save_keypair(self, name: str, keypair: Keypair):
        self._write_json(name, keypair_to_secret(keypair))

    def load_market_config(self) -> MarketConfig:
        return market_config_from_dict(str(self.path_for(MARKET)), self._read_json(MARKET))

    def save_market_config(self, config: MarketConfig):
        self._write_json(MARKET, config.to_dict())


class MemoryStateStore(StateStore):
    """纯内存状态存储，保存与文件版本相同的 JSON 结构"""

    def __init__(self):
        self._entries: Dict[str, object] = {}

    def _get(self, name: str):
        if name not in self._entries:
            raise StateError(name, "not found")
        return self._entries[name]

    def load_keypair(self, name: str) -> Keypair:
        return keypair_from_secret(name, self._get(name))

    def save_keypair(self, name: str, keypair: Keypair):
        self._entries[name] = keypair_to_secret(keypair)

    def load_market_config(self) -> MarketConfig:
        return market_config_from_dict(MARKET, self._get(MARKET))

    def save_market_config(self, config: MarketConfig):
        self._entries[MARKET] = config.to_dict()
