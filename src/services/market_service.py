"""
Market service functions

搭建测试市场（模拟 SFT / USDC 交易对）：
1. 创建 base / quote mint，给 maker 和 trader 铸币
2. initialize-market（等待确认）
3. approve-seat 给 maker（等待确认，依赖市场已创建）
4. 保存 mint authority 和市场配置

不幂等：每次运行都会创建新的市场并覆盖已保存的配置
"""
import logging

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from adapters.sft_api import build_params
from adapters.state_store import MINT_AUTHORITY, StateStore
from core.transactions import TransactionSender
from core.types import (
    ApiAction,
    BASE_MINT_AMOUNT,
    BASE_MINT_DECIMALS,
    Keypairs,
    MarketConfig,
    MarketParams,
    QUOTE_MINT_AMOUNT,
    QUOTE_MINT_DECIMALS,
)

logger = logging.getLogger(__name__)


async def create_test_market(
    api,
    sender: TransactionSender,
    minter,
    state_store: StateStore,
    payer: Keypair,
    market_authority: Keypair,
    maker: Pubkey,
    trader: Pubkey,
    market_params: MarketParams
) -> MarketConfig:
    """
    创建测试市场

    Args:
        api: SftApiClient
        sender: 交易发送器
        minter: SplTokenMinter（或测试替身）
        state_store: 保存生成的数据
        payer: 支付所有交易费用
        market_authority: 市场管理员，审批 seat
        maker: 挂单方公钥（获得 seat 和 base 代币）
        trader: 吃单方公钥（获得 quote 代币）
        market_params: 手续费 / 最小下单量 / tick

    Returns:
        新市场的配置
    """
    # 市场地址和 mint authority 都不需要充值
    market = Keypair()
    mint_authority = Keypair()

    logger.info("🪙 Creating mints...")
    base_mint = await minter.create_mint(mint_authority.pubkey(), BASE_MINT_DECIMALS)
    quote_mint = await minter.create_mint(mint_authority.pubkey(), QUOTE_MINT_DECIMALS)

    logger.info("🪙 Minting assets to maker and trader...")
    base_token = await minter.create_account(base_mint, maker)
    await minter.mint_to(base_mint, base_token, mint_authority, BASE_MINT_AMOUNT)

    quote_token = await minter.create_account(quote_mint, trader)
    await minter.mint_to(quote_mint, quote_token, mint_authority, QUOTE_MINT_AMOUNT)

    logger.info("📥 Getting initialize market tx...")
    params = build_params(
        payer=payer,
        marketAuthority=market_authority,
        baseMint=base_mint,
        quoteMint=quote_mint,
        market=market,
        **market_params.to_params(),
    )
    tx = await api.fetch_transaction(ApiAction.INITIALIZE_MARKET, params)
    sig = await sender.submit(tx, [payer, market, market_authority], confirm=True)
    logger.info(f"✅ Initialize market transaction: {sig}")

    logger.info("📥 Approving maker seat...")
    # 目前新 maker 的 seat 需要市场管理员手动审批
    params = build_params(
        payer=payer,
        market=market,
        trader=maker,
        marketAuthority=market_authority,
    )
    tx = await api.fetch_transaction(ApiAction.APPROVE_SEAT, params)
    sig = await sender.submit(tx, [market_authority, payer], confirm=True)
    logger.info(f"✅ Approved seat: {sig}")

    config = MarketConfig(
        market=market.pubkey(),
        base_mint=base_mint,
        quote_mint=quote_mint,
    )

    state_store.save_keypair(MINT_AUTHORITY, mint_authority)
    state_store.save_market_config(config)
    logger.info(f"💾 Market saved: {config.market}")

    return config


async def bootstrap_market(
    api,
    sender: TransactionSender,
    minter,
    state_store: StateStore,
    keypairs: Keypairs,
    market_params: MarketParams
) -> MarketConfig:
    """用四个角色的密钥创建测试市场"""
    return await create_test_market(
        api=api,
        sender=sender,
        minter=minter,
        state_store=state_store,
        payer=keypairs.payer,
        market_authority=keypairs.market_authority,
        maker=keypairs.maker.pubkey(),
        trader=keypairs.trader.pubkey(),
        market_params=market_params,
    )
