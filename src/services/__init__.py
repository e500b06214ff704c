"""
Services module - External service calls
Multi-step procedures against the SFT API and the Solana network
"""

from .market_service import create_test_market, bootstrap_market

__all__ = [
    "create_test_market",
    "bootstrap_market",
]
