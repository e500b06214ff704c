#!/usr/bin/env python3
"""
SFT 演示主程序

固定流程：创建测试市场 → 挂单 → 查询挂单 → 购买 → 撤单 → 修改订单

需要以下密钥（JSON 字节数组）且已充值 SOL：
- payer.json            支付交易费用
- maker.json            挂单，需要 seat
- trader.json           吃单
- marketAuthority.json  市场管理员，审批 seat
devnet 的 airdrop 限流严重，请在脚本外充值（scripts/generate_keypairs.py 可生成密钥）
"""

import argparse
import asyncio
import logging
import sys
import traceback
from typing import Optional, Sequence

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment

from adapters.sft_api import SftApiClient
from adapters.state_store import FileStateStore, StateStore
from adapters.token_minter import SplTokenMinter
from core.exceptions import ConfigError
from core.transactions import TransactionSender
from core.types import MarketConfig, MarketParams, TradeContext
from execution.orders import buy, cancel_order, edit_order, get_listings, list_order
from services.market_service import bootstrap_market
from utils.config import DemoConfig, load_config
from utils.logger import setup_structlog

logger = logging.getLogger(__name__)

# 演示场景参数
# tick=0.01 时 175 ticks = 1.75 USDC，挂 100 个 SFT
PRICE_IN_TICKS = 175
NUM_BASE_LOTS = 100
BUY_AMOUNT = 10
CANCEL_ORDER_SEQUENCE_NUMBER = 3
EDIT_ORDER_SEQUENCE_NUMBER = 1
EDIT_NEW_NUM_BASE_LOTS = 1000


async def run_demo(
    connection,
    api,
    state_store: StateStore,
    market_params: MarketParams,
    commitment: Commitment,
    minter=None,
    skip_bootstrap: bool = False,
    listing_settle_seconds: float = 2.0
) -> MarketConfig:
    """
    执行完整演示流程

    Args:
        connection: solana AsyncClient
        api: SftApiClient
        state_store: 密钥和市场配置存储
        market_params: 创建市场用的参数
        commitment: 确认交易的 commitment
        minter: mint 操作（为 None 时使用 SplTokenMinter）
        skip_bootstrap: 跳过创建市场，直接读取已保存的 market.json
        listing_settle_seconds: 挂单确认后等待 API 索引的时间

    Returns:
        使用的市场配置
    """
    keypairs = state_store.load_keypairs()

    if not skip_bootstrap:
        logger.info("=" * 60)
        logger.info("🏗️  CREATING TEST MARKET")
        logger.info("=" * 60)
        sender = TransactionSender(connection, commitment)
        await bootstrap_market(
            api=api,
            sender=sender,
            minter=minter or SplTokenMinter(connection, keypairs.payer, sender),
            state_store=state_store,
            keypairs=keypairs,
            market_params=market_params,
        )

    # 从存储读取，这样跳过创建时也能复用已有市场
    market_config = state_store.load_market_config()
    logger.info(f"📈 Market: {market_config.market}")

    ctx = TradeContext(
        connection=connection,
        api=api,
        market=market_config.market,
        commitment=commitment,
    )

    # maker 必须已有 seat
    await list_order(
        ctx,
        payer=keypairs.payer,
        maker=keypairs.maker,
        price_in_ticks=PRICE_IN_TICKS,
        num_base_lots=NUM_BASE_LOTS,
        confirm=True,
    )

    if listing_settle_seconds > 0:
        logger.info(f"⏳ Waiting {listing_settle_seconds}s for the listing to be indexed...")
        await asyncio.sleep(listing_settle_seconds)

    await get_listings(ctx)

    await buy(ctx, trader=keypairs.trader, amount=BUY_AMOUNT)

    await cancel_order(
        ctx,
        payer=keypairs.payer,
        maker=keypairs.maker,
        order_sequence_number=CANCEL_ORDER_SEQUENCE_NUMBER,
    )

    # 增加数量会撤单重挂，产生新的订单号
    await edit_order(
        ctx,
        maker=keypairs.maker,
        order_sequence_number=EDIT_ORDER_SEQUENCE_NUMBER,
        new_num_base_lots=EDIT_NEW_NUM_BASE_LOTS,
    )

    return market_config


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="SFT orderbook API demo")
    parser.add_argument(
        "--skip-bootstrap",
        action="store_true",
        help="reuse market.json instead of creating a new market",
    )
    parser.add_argument("--env-file", default=None, help="path to a .env file")
    return parser.parse_args(argv)


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """入口：返回进程退出码"""
    args = parse_args(argv)

    try:
        config: DemoConfig = load_config(args.env_file)
        setup_structlog(
            log_level=config.log_level,
            log_file=config.log_file,
            use_json=config.log_json,
        )
        api_key = config.require_api_key()
    except ConfigError as e:
        logging.basicConfig()
        logger.critical(f"配置错误: {e}")
        return 1

    logger.info(config.get_summary())

    commitment = Commitment(config.commitment.value)
    connection = AsyncClient(config.rpc_url, commitment=commitment)

    try:
        async with SftApiClient(
            base_url=config.api_base_url,
            api_key=api_key,
            timeout=config.api_timeout_seconds,
        ) as api:
            await run_demo(
                connection=connection,
                api=api,
                state_store=FileStateStore(config.state_dir),
                market_params=config.get_market_params(),
                commitment=commitment,
                skip_bootstrap=args.skip_bootstrap,
                listing_settle_seconds=config.listing_settle_seconds,
            )
    except Exception as e:
        logger.error(f"演示失败: {e}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        return 1
    finally:
        await connection.close()

    logger.info("✅ Demo finished")
    return 0


def cli():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
