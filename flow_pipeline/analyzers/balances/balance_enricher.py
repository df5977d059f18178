from typing import Dict, Iterable

from loguru import logger

from flow_pipeline.storage.constants import PageSizes
from flow_pipeline.storage.repositories.account_repository import AccountRepository


class BalanceEnricher:
    """Current balance summed across chains for an arbitrary address set."""

    def __init__(self, account_repository: AccountRepository, batch_size: int = PageSizes.ADDRESS_BATCH):
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.account_repository = account_repository
        self.batch_size = batch_size

    def resolve(self, addresses: Iterable[str]) -> Dict[str, int]:
        # Every requested address gets an entry, zero when it has no ledger row.
        unique = list(dict.fromkeys(address.lower() for address in addresses))
        balances: Dict[str, int] = {address: 0 for address in unique}

        for i in range(0, len(unique), self.batch_size):
            batch = unique[i:i + self.batch_size]
            for row in self.account_repository.fetch_by_addresses(batch):
                balances[row.address] = balances.get(row.address, 0) + row.balance

        logger.info(f"Resolved balances for {len(unique)} addresses")
        return balances
