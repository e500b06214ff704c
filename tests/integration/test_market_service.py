#!/usr/bin/env python3
"""
测试市场搭建 (market_service.py)

- mint 参数和铸币数量
- initialize-market / approve-seat 的参数、签名者、确认
- 保存结果，重复运行生成新市场并覆盖 market.json
"""

import json

import pytest
import pytest_asyncio
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from adapters.state_store import FileStateStore, MINT_AUTHORITY
from core.exceptions import ApiRequestError
from core.transactions import TransactionSender
from core.types import Keypairs, MarketParams
from services.market_service import bootstrap_market
from tests.integration.mock_adapters import FakeSftApi, MockRpcConnection, MockTokenMinter

MARKET_PARAMS = MarketParams(taker_fee_bps=100, min_order_size=1, tick_size=0.01)


@pytest.fixture
def keypairs():
    return Keypairs(payer=Keypair(), maker=Keypair(), trader=Keypair(), market_authority=Keypair())


@pytest.fixture
def backend():
    return FakeSftApi()


@pytest.fixture
def connection():
    return MockRpcConnection()


@pytest.fixture
def minter():
    return MockTokenMinter()


@pytest.fixture
def store(tmp_path):
    return FileStateStore(tmp_path)


@pytest_asyncio.fixture
async def api(backend):
    client = backend.client()
    yield client
    await client.close()


async def run_bootstrap(api, connection, minter, store, keypairs):
    return await bootstrap_market(
        api=api,
        sender=TransactionSender(connection),
        minter=minter,
        state_store=store,
        keypairs=keypairs,
        market_params=MARKET_PARAMS,
    )


class TestBootstrap:

    @pytest.mark.asyncio
    async def test_mints_and_funding(self, api, connection, minter, store, keypairs):
        config = await run_bootstrap(api, connection, minter, store, keypairs)

        assert minter.mints[config.base_mint].decimals == 0
        assert minter.mints[config.quote_mint].decimals == 6

        mint_authority = store.load_keypair(MINT_AUTHORITY).pubkey()
        assert minter.mints[config.base_mint].authority == mint_authority

        funded = {(m.mint, minter.accounts[m.dest].owner): m.amount for m in minter.minted}
        assert funded == {
            (config.base_mint, keypairs.maker.pubkey()): 1000,
            (config.quote_mint, keypairs.trader.pubkey()): 1000 * 10 ** 6,
        }

    @pytest.mark.asyncio
    async def test_initialize_market_request(self, api, backend, connection, minter, store, keypairs):
        config = await run_bootstrap(api, connection, minter, store, keypairs)

        assert backend.actions() == ["initialize-market", "approve-seat"]
        assert backend.params_for("initialize-market") == {
            "payer": str(keypairs.payer.pubkey()),
            "marketAuthority": str(keypairs.market_authority.pubkey()),
            "baseMint": str(config.base_mint),
            "quoteMint": str(config.quote_mint),
            "market": str(config.market),
            "takerFeeBps": "100",
            "minOrderSize": "1",
            "tickSize": "0.01",
        }

    @pytest.mark.asyncio
    async def test_approve_seat_request(self, api, backend, connection, minter, store, keypairs):
        config = await run_bootstrap(api, connection, minter, store, keypairs)

        assert backend.params_for("approve-seat") == {
            "payer": str(keypairs.payer.pubkey()),
            "market": str(config.market),
            "trader": str(keypairs.maker.pubkey()),
            "marketAuthority": str(keypairs.market_authority.pubkey()),
        }

    @pytest.mark.asyncio
    async def test_both_transactions_confirmed(self, api, connection, minter, store, keypairs):
        config = await run_bootstrap(api, connection, minter, store, keypairs)

        assert len(connection.sent) == 2
        assert connection.confirmed == [tx.signatures[0] for tx in connection.sent]

        assert set(connection.signers_of(0)) == {
            keypairs.payer.pubkey(),
            config.market,
            keypairs.market_authority.pubkey(),
        }
        assert set(connection.signers_of(1)) == {
            keypairs.payer.pubkey(),
            keypairs.market_authority.pubkey(),
        }

    @pytest.mark.asyncio
    async def test_persists_market(self, api, connection, minter, store, keypairs, tmp_path):
        config = await run_bootstrap(api, connection, minter, store, keypairs)

        data = json.loads((tmp_path / "market.json").read_text())
        assert Pubkey.from_string(data["market"]) == config.market
        assert len(json.loads((tmp_path / "mintAuthority.json").read_text())) == 64

    @pytest.mark.asyncio
    async def test_rerun_creates_new_market_and_overwrites(self, api, connection, minter, store, keypairs, tmp_path):
        first = await run_bootstrap(api, connection, minter, store, keypairs)
        second = await run_bootstrap(api, connection, minter, store, keypairs)

        assert first.market != second.market
        assert store.load_market_config() == second
        data = json.loads((tmp_path / "market.json").read_text())
        assert data == second.to_dict()

    @pytest.mark.asyncio
    async def test_initialize_failure_stops_bootstrap(self, api, backend, connection, minter, store, keypairs, tmp_path):
        backend.failures["initialize-market"] = 500

        with pytest.raises(ApiRequestError):
            await run_bootstrap(api, connection, minter, store, keypairs)

        assert connection.sent == []
        assert backend.actions() == ["initialize-market"]
        assert not (tmp_path / "market.json").exists()
