from app.clients.accounts import AccountsClient
from app.clients.errors import UpstreamServiceError
from app.clients.product_tokens import ProductTokensClient

__all__ = [
    "AccountsClient",
    "ProductTokensClient",
    "UpstreamServiceError",
]
