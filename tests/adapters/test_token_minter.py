#!/usr/bin/env python3
"""
测试 SPL Token 操作 (token_minter.py)

AsyncToken 被替换为记录调用的假实现，确认走 MockRpcConnection：
1. create_mint 的 decimals 和 freeze authority
2. mint_to 等待确认，交易失败时抛出 SubmissionError
3. RPC 异常转换为 SubmissionError
"""

from types import SimpleNamespace

import pytest
from solana.rpc.core import RPCException
from solders.keypair import Keypair

from adapters import token_minter
from adapters.token_minter import SplTokenMinter
from core.exceptions import SubmissionError
from core.transactions import TransactionSender
from core.types import BASE_MINT_DECIMALS, QUOTE_MINT_DECIMALS
from tests.integration.mock_adapters import MockRpcConnection


class FakeAsyncToken:
    """记录 create_mint / create_account / mint_to 调用"""

    created = []
    accounts = []
    mint_calls = []
    error = None

    def __init__(self, conn, pubkey, program_id, payer):
        self.conn = conn
        self.pubkey = pubkey
        self.program_id = program_id
        self.payer = payer

    @classmethod
    async def create_mint(cls, conn, payer, mint_authority, decimals, program_id, freeze_authority=None, **kwargs):
        if cls.error:
            raise cls.error
        token = cls(conn, Keypair().pubkey(), program_id, payer)
        cls.created.append(SimpleNamespace(
            mint=token.pubkey,
            payer=payer.pubkey(),
            mint_authority=mint_authority,
            freeze_authority=freeze_authority,
            decimals=decimals,
        ))
        return token

    async def create_account(self, owner):
        account = Keypair().pubkey()
        self.accounts.append(SimpleNamespace(mint=self.pubkey, owner=owner, account=account))
        return account

    async def mint_to(self, dest, mint_authority, amount, **kwargs):
        if self.error:
            raise self.error
        sig = mint_authority.sign_message(bytes(dest) + amount.to_bytes(8, "little"))
        self.mint_calls.append(SimpleNamespace(mint=self.pubkey, dest=dest, amount=amount, sig=sig))
        return SimpleNamespace(value=sig)


@pytest.fixture(autouse=True)
def fake_token(monkeypatch):
    FakeAsyncToken.created = []
    FakeAsyncToken.accounts = []
    FakeAsyncToken.mint_calls = []
    FakeAsyncToken.error = None
    monkeypatch.setattr(token_minter, "AsyncToken", FakeAsyncToken)
    return FakeAsyncToken


@pytest.fixture
def connection():
    return MockRpcConnection()


@pytest.fixture
def payer():
    return Keypair()


@pytest.fixture
def minter(connection, payer):
    return SplTokenMinter(connection, payer, TransactionSender(connection))


class TestCreateMint:
    """测试 mint 创建"""

    @pytest.mark.asyncio
    async def test_base_and_quote_decimals(self, minter, fake_token, payer):
        authority = Keypair().pubkey()

        base_mint = await minter.create_mint(authority, BASE_MINT_DECIMALS)
        quote_mint = await minter.create_mint(authority, QUOTE_MINT_DECIMALS)

        base, quote = fake_token.created
        assert (base.mint, base.decimals) == (base_mint, 0)
        assert (quote.mint, quote.decimals) == (quote_mint, 6)
        assert base.payer == payer.pubkey()

    @pytest.mark.asyncio
    async def test_authority_is_mint_and_freeze_authority(self, minter, fake_token):
        authority = Keypair().pubkey()

        await minter.create_mint(authority, BASE_MINT_DECIMALS)

        created = fake_token.created[0]
        assert created.mint_authority == authority
        assert created.freeze_authority == authority

    @pytest.mark.asyncio
    async def test_rpc_error_becomes_submission_error(self, minter, fake_token):
        fake_token.error = RPCException({"code": -32002, "message": "insufficient funds"})

        with pytest.raises(SubmissionError):
            await minter.create_mint(Keypair().pubkey(), BASE_MINT_DECIMALS)


class TestCreateAccount:

    @pytest.mark.asyncio
    async def test_account_for_owner(self, minter, fake_token):
        mint = Keypair().pubkey()
        owner = Keypair().pubkey()

        account = await minter.create_account(mint, owner)

        recorded = fake_token.accounts[0]
        assert recorded.account == account
        assert (recorded.mint, recorded.owner) == (mint, owner)


class TestMintTo:
    """测试铸币确认"""

    @pytest.mark.asyncio
    async def test_waits_for_confirmation(self, minter, fake_token, connection):
        mint = Keypair().pubkey()
        dest = Keypair().pubkey()

        await minter.mint_to(mint, dest, Keypair(), 1000)

        call = fake_token.mint_calls[0]
        assert (call.mint, call.dest, call.amount) == (mint, dest, 1000)
        assert connection.confirmed == [call.sig]

    @pytest.mark.asyncio
    async def test_failed_status_raises(self, minter, fake_token, connection):
        authority = Keypair()
        dest = Keypair().pubkey()
        sig = authority.sign_message(bytes(dest) + (1000).to_bytes(8, "little"))
        connection.failed_signatures[str(sig)] = "InstructionError"

        with pytest.raises(SubmissionError):
            await minter.mint_to(Keypair().pubkey(), dest, authority, 1000)

        assert connection.confirmed == [sig]

    @pytest.mark.asyncio
    async def test_rpc_error_becomes_submission_error(self, minter, fake_token, connection):
        fake_token.error = RPCException({"code": -32003, "message": "mint authority mismatch"})

        with pytest.raises(SubmissionError):
            await minter.mint_to(Keypair().pubkey(), Keypair().pubkey(), Keypair(), 1000)

        assert connection.confirmed == []

    @pytest.mark.asyncio
    async def test_default_sender_uses_connection(self, connection, payer, fake_token):
        minter = SplTokenMinter(connection, payer)

        await minter.mint_to(Keypair().pubkey(), Keypair().pubkey(), Keypair(), 5)

        assert minter.sender.connection is connection
        assert connection.confirmed == [fake_token.mint_calls[0].sig]
