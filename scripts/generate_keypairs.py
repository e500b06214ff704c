#!/usr/bin/env python3
"""
生成演示所需的四个密钥文件

payer.json / maker.json / trader.json / marketAuthority.json
已存在的文件不会被覆盖（除非 --force）

生成后需要在脚本外给这些地址充值 SOL（devnet airdrop 限流严重）
"""

import argparse
import os
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from solders.keypair import Keypair

from adapters.state_store import FileStateStore, ROLE_NAMES


def generate_keypairs(state_dir: str, force: bool = False) -> dict:
    """
    生成缺失的密钥

    Returns:
        {role: pubkey}（包含已存在的密钥）
    """
    store = FileStateStore(state_dir)
    result = {}

    for role in ROLE_NAMES:
        if store.exists(role) and not force:
            keypair = store.load_keypair(role)
            print(f"  {role:<16} {keypair.pubkey()}  (existing)")
        else:
            keypair = Keypair()
            store.save_keypair(role, keypair)
            print(f"  {role:<16} {keypair.pubkey()}  (new)")
        result[role] = keypair.pubkey()

    return result


def main():
    parser = argparse.ArgumentParser(description="Generate demo keypair files")
    parser.add_argument("--dir", default=os.getenv("STATE_DIR", "."), help="output directory")
    parser.add_argument("--force", action="store_true", help="overwrite existing key files")
    args = parser.parse_args()

    print("=" * 60)
    print(f"Keypairs in {Path(args.dir).resolve()}")
    print("=" * 60)
    generate_keypairs(args.dir, force=args.force)
    print()
    print("Fund these addresses with devnet SOL before running src/main.py")


if __name__ == "__main__":
    main()
