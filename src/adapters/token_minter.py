#!/usr/bin/env python3
"""
SPL Token 操作 - 创建测试用的 mint 和代币账户

生产环境中 base / quote mint 通常已经存在，这里只用于搭建测试市场
"""

import logging
from typing import Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.core import RPCException
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.async_client import AsyncToken
from spl.token.constants import TOKEN_PROGRAM_ID

from core.exceptions import SubmissionError
from core.transactions import TransactionSender

logger = logging.getLogger(__name__)


class SplTokenMinter:
    """基于 solana-py AsyncToken 的 mint 操作"""

    def __init__(self, connection, payer: Keypair, sender: Optional[TransactionSender] = None):
        """
        Args:
            connection: solana AsyncClient
            payer: 支付账户创建费用
            sender: 用于确认铸币交易（默认使用 connection 新建）
        """
        self.connection = connection
        self.payer = payer
        self.sender = sender or TransactionSender(connection)

    def _token(self, mint: Pubkey) -> AsyncToken:
        return AsyncToken(self.connection, mint, TOKEN_PROGRAM_ID, self.payer)

    async def create_mint(self, authority: Pubkey, decimals: int) -> Pubkey:
        """创建 mint，authority 同时作为 mint 和 freeze authority"""
        try:
            token = await AsyncToken.create_mint(
                self.connection,
                self.payer,
                authority,
                decimals,
                TOKEN_PROGRAM_ID,
                freeze_authority=authority,
            )
        except (RPCException, SolanaRpcException) as e:
            raise SubmissionError("Failed to create mint", {"decimals": decimals, "error": str(e)}) from e

        logger.debug(f"Mint created: {token.pubkey} (decimals={decimals})")
        return token.pubkey

    async def create_account(self, mint: Pubkey, owner: Pubkey) -> Pubkey:
        """为 owner 创建代币账户"""
        try:
            return await self._token(mint).create_account(owner)
        except (RPCException, SolanaRpcException) as e:
            raise SubmissionError("Failed to create token account", {"mint": str(mint), "error": str(e)}) from e

    async def mint_to(self, mint: Pubkey, dest: Pubkey, authority: Keypair, amount: int):
        """铸币到指定账户并等待确认，交易失败时抛出 SubmissionError"""
        try:
            resp = await self._token(mint).mint_to(dest, authority, amount)
        except (RPCException, SolanaRpcException) as e:
            raise SubmissionError("Failed to mint tokens", {"mint": str(mint), "error": str(e)}) from e

        await self.sender.confirm(resp.value)
