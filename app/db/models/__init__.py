from app.db.models.base import Base
from app.db.models.flat_hives import FlatHive
from app.db.models.hives import Hive
from app.db.models.transactions import Transaction

__all__ = [
    "Base",
    "FlatHive",
    "Hive",
    "Transaction",
]
