from __future__ import annotations

from app.hive.masking import mask_wallet_address


def test_mask_keeps_prefix_and_suffix() -> None:
    assert mask_wallet_address("0x742d35Cc6634C0532925a3b844Bc454e4438f44e") == "0x742d...f44e"


def test_mask_returns_short_address_unchanged() -> None:
    assert mask_wallet_address("0x742d35") == "0x742d35"
    assert mask_wallet_address("") == ""


def test_mask_handles_exactly_ten_characters() -> None:
    assert mask_wallet_address("0123456789") == "012345...6789"
