"""Service providers used by the reporter."""

from .event_filter import AllowAllFilter
from .http_client import DeliveryClient
from .quick_operation import LoggingQuickOperationHandler, QuickOperationRelay, parse_quick_operation
from .signer import Signer, sign

__all__ = [
    "AllowAllFilter",
    "DeliveryClient",
    "LoggingQuickOperationHandler",
    "QuickOperationRelay",
    "Signer",
    "parse_quick_operation",
    "sign",
]
