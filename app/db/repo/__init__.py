from app.db.repo.flat_hives_repo import FlatHivesRepo
from app.db.repo.hives_repo import HivesRepo
from app.db.repo.transactions_repo import TransactionsRepo

__all__ = [
    "FlatHivesRepo",
    "HivesRepo",
    "TransactionsRepo",
]
