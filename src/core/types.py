"""
核心类型定义

集中定义市场、密钥和 API 动作的数据类型
遵循原则：
- 纯数据类型，不包含业务逻辑
- 避免循环导入
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from solders.keypair import Keypair
from solders.pubkey import Pubkey


# ========== 常量 ==========

BASE_MINT_DECIMALS = 0      # SFT 只能整数交易
QUOTE_MINT_DECIMALS = 6     # 模拟 USDC
BASE_MINT_AMOUNT = 1000
QUOTE_MINT_AMOUNT = 1000 * 10 ** QUOTE_MINT_DECIMALS


# ========== API 动作 ==========

class ApiAction(str, Enum):
    """SFT API 的端点名称"""
    INITIALIZE_MARKET = "initialize-market"
    APPROVE_SEAT = "approve-seat"
    LIST = "list"
    EDIT = "edit"
    BUY = "buy"
    CANCEL = "cancel"
    LISTINGS = "listings"


# ========== 数据结构 ==========

@dataclass(frozen=True)
class MarketParams:
    """创建市场时提交的参数"""
    taker_fee_bps: int      # 吃单手续费（基点）
    min_order_size: int     # 最小下单量（base 单位）
    tick_size: float        # 最小价格变动（quote 单位）

    def to_params(self) -> Dict[str, Any]:
        return {
            "takerFeeBps": self.taker_fee_bps,
            "minOrderSize": self.min_order_size,
            "tickSize": self.tick_size,
        }


@dataclass(frozen=True)
class MarketConfig:
    """市场及其两个 mint 的地址"""
    market: Pubkey
    base_mint: Pubkey
    quote_mint: Pubkey

    def to_dict(self) -> Dict[str, str]:
        return {
            "market": str(self.market),
            "baseMint": str(self.base_mint),
            "quoteMint": str(self.quote_mint),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "MarketConfig":
        return cls(
            market=Pubkey.from_string(data["market"]),
            base_mint=Pubkey.from_string(data["baseMint"]),
            quote_mint=Pubkey.from_string(data["quoteMint"]),
        )


@dataclass(frozen=True)
class Keypairs:
    """演示所需的四个角色"""
    payer: Keypair              # 支付手续费
    maker: Keypair              # 挂单，需要 seat
    trader: Keypair             # 吃单
    market_authority: Keypair   # 审批 seat


@dataclass
class TradeContext:
    """所有交易操作共用的参数"""
    connection: Any     # solana AsyncClient（或测试用的模拟连接）
    api: Any            # SftApiClient
    market: Pubkey
    commitment: Any = None
