#!/usr/bin/env python3
"""
交易签名与发送

API 返回的交易是未签名的 VersionedTransaction：
- 本地按角色部分签名（保留已有签名，签名顺序无关）
- 发送到 RPC 节点，按需等待确认
"""

import logging
from typing import List, Optional, Sequence

from solana.exceptions import SolanaRpcException
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import RPCException, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.message import to_bytes_versioned
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from core.exceptions import SigningError, SubmissionError

logger = logging.getLogger(__name__)


def required_signers(tx: VersionedTransaction) -> List[Pubkey]:
    """交易要求的签名者（account_keys 的前 num_required_signatures 个）"""
    message = tx.message
    count = message.header.num_required_signatures
    return list(message.account_keys[:count])


def missing_signers(tx: VersionedTransaction) -> List[Pubkey]:
    """签名位仍为空的签名者"""
    empty = Signature.default()
    return [
        key for key, sig in zip(required_signers(tx), tx.signatures)
        if sig == empty
    ]


def sign_transaction(tx: VersionedTransaction, signers: Sequence[Keypair]) -> VersionedTransaction:
    """
    部分签名

    Args:
        tx: 反序列化后的交易
        signers: 参与签名的密钥，顺序无关

    Returns:
        带新签名的交易（原交易不变）

    Raises:
        SigningError: 某个密钥不是该交易的签名者
    """
    expected = required_signers(tx)
    signatures = list(tx.signatures)
    # 未签名的交易可能没有预留签名位
    if len(signatures) < len(expected):
        signatures += [Signature.default()] * (len(expected) - len(signatures))

    message_bytes = to_bytes_versioned(tx.message)

    for keypair in signers:
        pubkey = keypair.pubkey()
        if pubkey not in expected:
            raise SigningError(
                "Keypair is not a required signer",
                {"pubkey": str(pubkey), "expected": [str(k) for k in expected]}
            )
        signatures[expected.index(pubkey)] = keypair.sign_message(message_bytes)

    return VersionedTransaction.populate(tx.message, signatures)


class TransactionSender:
    """签名并发送交易（对 RPC 连接的薄封装）"""

    def __init__(self, connection, commitment: Commitment = Confirmed):
        """
        Args:
            connection: solana AsyncClient
            commitment: 等待确认时使用的 commitment
        """
        self.connection = connection
        self.commitment = commitment

    async def submit(
        self,
        tx: VersionedTransaction,
        signers: Sequence[Keypair],
        confirm: bool = False
    ) -> Signature:
        """
        签名、发送，可选等待确认

        Args:
            tx: 未签名交易
            signers: 该操作需要的签名者
            confirm: 是否阻塞到交易被确认

        Returns:
            交易签名
        """
        signed = sign_transaction(tx, signers)

        try:
            resp = await self.connection.send_transaction(
                signed,
                opts=TxOpts(preflight_commitment=self.commitment)
            )
        except (RPCException, SolanaRpcException) as e:
            raise SubmissionError("Failed to send transaction", {"error": str(e)}) from e

        sig = resp.value
        logger.debug(f"Transaction sent: {sig}")

        if confirm:
            await self.confirm(sig)

        return sig

    async def confirm(self, sig: Signature, commitment: Optional[Commitment] = None):
        """等待交易确认，交易执行失败时抛出 SubmissionError"""
        try:
            resp = await self.connection.confirm_transaction(
                sig,
                commitment=commitment or self.commitment
            )
        except (RPCException, SolanaRpcException, UnconfirmedTxError) as e:
            raise SubmissionError("Failed to confirm transaction", {"signature": str(sig), "error": str(e)}) from e

        statuses = resp.value or []
        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            raise SubmissionError("Transaction failed", {"signature": str(sig), "error": str(status.err)})

        logger.debug(f"Transaction confirmed: {sig}")
