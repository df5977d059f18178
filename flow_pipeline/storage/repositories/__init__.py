from flow_pipeline.storage.repositories.account_repository import AccountRepository
from flow_pipeline.storage.repositories.address_label_repository import AddressLabelRepository
from flow_pipeline.storage.repositories.base_repository import BaseRepository
from flow_pipeline.storage.repositories.transfer_repository import TransferRepository

__all__ = [
    "AccountRepository",
    "AddressLabelRepository",
    "BaseRepository",
    "TransferRepository",
]
