from flow_pipeline.storage.client import (
    ClientFactory,
    LedgerClient,
    LedgerError,
    LedgerQueryError,
    LedgerTransportError,
    get_connection_params,
)
from flow_pipeline.storage.models import AccountRow, TransferRow

__all__ = [
    "ClientFactory",
    "LedgerClient",
    "LedgerError",
    "LedgerQueryError",
    "LedgerTransportError",
    "get_connection_params",
    "AccountRow",
    "TransferRow",
]
