#!/usr/bin/env python3
"""
SFT API 客户端 - 远程交易请求

职责：
- GET <base_url>/<action>?<params>，返回未签名交易
- 查询挂单列表

特点：
- 只做 I/O，不做重试
- 所有公钥转为 base58 文本，数值原样传递
"""

import json
import logging
from typing import Any, Dict, Optional, Union

import httpx
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from core.exceptions import ApiRequestError, ConfigError, TransactionDecodeError
from core.types import ApiAction

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-TENSOR-API-KEY"


def build_params(**fields: Any) -> Dict[str, Any]:
    """
    构造查询参数

    - Pubkey → base58 字符串
    - Keypair → 其公钥的 base58 字符串
    - None → 丢弃
    - 其他值原样保留
    """
    params = {}
    for name, value in fields.items():
        if value is None:
            continue
        if isinstance(value, Keypair):
            value = str(value.pubkey())
        elif isinstance(value, Pubkey):
            value = str(value)
        params[name] = value
    return params


def decode_transaction(action: str, payload: bytes) -> VersionedTransaction:
    """
    反序列化 API 返回的交易

    API 可能直接返回二进制，也可能返回 JSON 编码的字节数组
    （[1, 2, ...] 或 Node Buffer 格式 {"type": "Buffer", "data": [...]}）
    """
    raw = _unwrap_json_bytes(payload)
    try:
        return VersionedTransaction.from_bytes(raw)
    except Exception as e:
        # solders 抛出的异常类型不固定（ValueError / SerdeError 等）
        raise TransactionDecodeError(action, str(e)) from e


def _unwrap_json_bytes(payload: bytes) -> bytes:
    stripped = payload.lstrip()
    if stripped[:1] not in (b"[", b"{"):
        return payload

    try:
        data = json.loads(stripped)
    except (ValueError, UnicodeDecodeError):
        return payload

    if isinstance(data, dict) and data.get("type") == "Buffer":
        data = data.get("data")
    if isinstance(data, list) and all(isinstance(b, int) and 0 <= b <= 255 for b in data):
        return bytes(data)
    return payload


class SftApiClient:
    """SFT API 的 httpx 封装"""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            base_url: API 根地址（以 / 结尾）
            api_key: X-TENSOR-API-KEY
            timeout: 请求超时（秒）
            transport: 自定义 transport（测试时注入 MockTransport）
        """
        if not api_key:
            raise ConfigError("SFT API key is missing", {"env": "X_TENSOR_API_KEY"})

        if not base_url.endswith("/"):
            base_url += "/"

        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={API_KEY_HEADER: api_key},
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        await self._client.aclose()

    async def _get(self, action: Union[ApiAction, str], params: Dict[str, Any]) -> httpx.Response:
        name = action.value if isinstance(action, ApiAction) else action
        logger.debug(f"GET {name} {params}")

        try:
            response = await self._client.get(name, params=params)
        except httpx.HTTPError as e:
            raise ApiRequestError(name, str(e)) from e

        if not response.is_success:
            raise ApiRequestError(name, response.text[:500], status_code=response.status_code)

        return response

    async def fetch_transaction(
        self,
        action: Union[ApiAction, str],
        params: Dict[str, Any]
    ) -> VersionedTransaction:
        """
        获取未签名交易

        Raises:
            ApiRequestError: 网络错误或非 2xx 状态码
            TransactionDecodeError: 返回数据无法反序列化
        """
        response = await self._get(action, params)
        name = action.value if isinstance(action, ApiAction) else action
        return decode_transaction(name, response.content)

    async def get_listings(self, market: Pubkey) -> Any:
        """查询市场当前挂单（无缓存、无分页）"""
        response = await self._get(ApiAction.LISTINGS, build_params(market=market))
        try:
            return response.json()
        except ValueError as e:
            raise ApiRequestError(ApiAction.LISTINGS.value, f"Invalid JSON: {e}") from e
