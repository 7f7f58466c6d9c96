# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .order import Order, OrderItem

__all__ = [
    "Order",
    "OrderItem",
]
