from ppob_api.models.user import User, RefreshToken, Role, UserStatus
from ppob_api.models.product import Product
from ppob_api.models.transaction import Transaction, TransactionStatus
from ppob_api.models.branch import Branch, Nasabah

__all__ = [
    "User",
    "RefreshToken",
    "Role",
    "UserStatus",
    "Product",
    "Transaction",
    "TransactionStatus",
    "Branch",
    "Nasabah",
]
