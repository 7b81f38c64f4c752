from .base import BaseModel
from .user import User
from .transaction import Transaction
from .setting import UserSetting

__all__ = [
    "BaseModel",
    "User",
    "Transaction",
    "UserSetting",
]
