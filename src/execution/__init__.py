"""
Execution module - Side-effect operations
All functions here submit transactions to the network
"""

from .orders import list_order, edit_order, buy, cancel_order, get_listings

__all__ = [
    "list_order",
    "edit_order",
    "buy",
    "cancel_order",
    "get_listings",
]
