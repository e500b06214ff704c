"""
Order execution functions

挂单 / 修改 / 购买 / 撤单：
请求未签名交易 → 按角色签名 → 发送（默认不等待确认）

本地不校验前置条件（seat、订单号是否存在等），由 API 和链上程序负责
"""
import logging
from typing import Any

from solders.keypair import Keypair
from solders.signature import Signature

from adapters.sft_api import build_params
from core.transactions import TransactionSender
from core.types import ApiAction, TradeContext

logger = logging.getLogger(__name__)


def _sender(ctx: TradeContext) -> TransactionSender:
    if ctx.commitment is None:
        return TransactionSender(ctx.connection)
    return TransactionSender(ctx.connection, ctx.commitment)


async def list_order(
    ctx: TradeContext,
    payer: Keypair,
    maker: Keypair,
    price_in_ticks: int,
    num_base_lots: int,
    confirm: bool = False
) -> Signature:
    """
    挂卖单（maker 必须已有 seat）

    Args:
        ctx: 连接 / API / 市场
        payer: 支付手续费
        maker: 挂单方
        price_in_ticks: 价格（tick 数，tick=0.01 时 175 表示 1.75）
        num_base_lots: 数量（base lot）
        confirm: 是否等待确认

    Returns:
        交易签名
    """
    params = build_params(
        payer=payer,
        market=ctx.market,
        maker=maker,
        priceInTicks=price_in_ticks,
        numBaseLots=num_base_lots,
    )
    tx = await ctx.api.fetch_transaction(ApiAction.LIST, params)

    sig = await _sender(ctx).submit(tx, [payer, maker], confirm=confirm)
    logger.info(f"✅ Listed SFTs: {sig}")
    return sig


async def edit_order(
    ctx: TradeContext,
    maker: Keypair,
    order_sequence_number: int,
    new_num_base_lots: int,
    confirm: bool = False
) -> Signature:
    """
    修改挂单数量

    减少数量在原订单上修改；增加数量会撤单重挂，产生新的订单号
    """
    params = build_params(
        market=ctx.market,
        maker=maker,
        orderSequenceNumber=order_sequence_number,
        newNumBaseLots=new_num_base_lots,
    )
    tx = await ctx.api.fetch_transaction(ApiAction.EDIT, params)

    logger.info("📤 Submitting edit transaction...")
    sig = await _sender(ctx).submit(tx, [maker], confirm=confirm)
    logger.info(f"✅ Edited order {order_sequence_number}: {sig}")
    return sig


async def buy(
    ctx: TradeContext,
    trader: Keypair,
    amount: int,
    confirm: bool = False
) -> Signature:
    """吃单买入（amount 为整数个 SFT）"""
    params = build_params(
        market=ctx.market,
        trader=trader,
        amount=amount,
    )
    tx = await ctx.api.fetch_transaction(ApiAction.BUY, params)

    sig = await _sender(ctx).submit(tx, [trader], confirm=confirm)
    logger.info(f"✅ Bought SFTs: {sig}")
    return sig


async def cancel_order(
    ctx: TradeContext,
    payer: Keypair,
    maker: Keypair,
    order_sequence_number: int,
    confirm: bool = False
) -> Signature:
    """
    撤单

    注意：API 的参数名是 trader，但传的是 maker 的公钥
    """
    params = build_params(
        payer=payer,
        market=ctx.market,
        trader=maker,
        orderSequenceNumber=order_sequence_number,
    )
    tx = await ctx.api.fetch_transaction(ApiAction.CANCEL, params)

    sig = await _sender(ctx).submit(tx, [payer, maker], confirm=confirm)
    logger.info(f"✅ Canceled order number {order_sequence_number}: {sig}")
    return sig


async def get_listings(ctx: TradeContext) -> Any:
    """查询并打印当前挂单"""
    listings = await ctx.api.get_listings(ctx.market)
    logger.info(f"📋 Listings for {ctx.market}: {listings}")
    return listings
