from .user import User
from .category import Category
from .transaction import Transaction, TransactionType
from .budget import Budget

__all__ = ["User", "Category", "Transaction", "TransactionType", "Budget"]
