from __future__ import annotations

from app.hive.constants import (
    WALLET_MASK_PREFIX_LEN,
    WALLET_MASK_SEPARATOR,
    WALLET_MASK_SUFFIX_LEN,
)


def mask_wallet_address(address: str) -> str:
    """Shorten a wallet address to ``0x742d...f44e`` form.

    Addresses too short to hide anything are returned as-is.
    """
    if len(address) < WALLET_MASK_PREFIX_LEN + WALLET_MASK_SUFFIX_LEN:
        return address
    return (
        f"{address[:WALLET_MASK_PREFIX_LEN]}"
        f"{WALLET_MASK_SEPARATOR}"
        f"{address[-WALLET_MASK_SUFFIX_LEN:]}"
    )
