#!/usr/bin/env python3
"""
检查演示密钥的 SOL 余额
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from solana.rpc.async_api import AsyncClient

from adapters.state_store import FileStateStore, ROLE_NAMES
from utils.config import load_config

LAMPORTS_PER_SOL = 1_000_000_000


async def main():
    config = load_config()
    store = FileStateStore(config.state_dir)
    client = AsyncClient(config.rpc_url)

    try:
        print(f"RPC: {config.rpc_url}")
        for role in ROLE_NAMES:
            pubkey = store.load_keypair(role).pubkey()
            resp = await client.get_balance(pubkey)
            print(f"  {role:<16} {pubkey}  {resp.value / LAMPORTS_PER_SOL:.4f} SOL")
    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
