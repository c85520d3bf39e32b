import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from app.hive.masking import mask_wallet_address

WALLET_LOG_KEYS = ("wallet_address", "owner_address", "wallet_public_key")


def mask_wallet_fields(
    _logger: Any,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    for key in WALLET_LOG_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = mask_wallet_address(value)
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            timestamper,
            mask_wallet_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
