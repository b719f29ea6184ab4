"""Preorder and wholesale order intake helpers."""

from .ids import OrderCounterState, OrderIdGenerator
from .models import Preorder, WholesaleOrder

__all__ = ["OrderCounterState", "OrderIdGenerator", "Preorder", "WholesaleOrder"]
