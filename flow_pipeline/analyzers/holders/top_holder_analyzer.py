from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

from loguru import logger

from flow_pipeline.storage.constants import PageSizes, TOP_N, ZERO_ADDRESS, chain_name
from flow_pipeline.storage.models import AccountRow
from flow_pipeline.storage.repositories.account_repository import AccountRepository


@dataclass
class HolderEntry:
    balance: int = 0
    transfer_count: int = 0
    chains: Set[str] = field(default_factory=set)


class TopHolderAnalyzer:

    def __init__(
        self,
        account_repository: AccountRepository,
        top_n: int = TOP_N,
        page_size: int = PageSizes.ACCOUNTS,
    ):
        self.account_repository = account_repository
        self.top_n = top_n
        self.page_size = page_size

    @staticmethod
    def merge(holders: Dict[str, HolderEntry], rows: Iterable[AccountRow]) -> Dict[str, HolderEntry]:
        for row in rows:
            # The mint/burn sink is never a holder.
            if row.address == ZERO_ADDRESS:
                continue
            entry = holders.setdefault(row.address, HolderEntry())
            entry.balance += row.balance
            entry.transfer_count += row.transfer_count
            entry.chains.add(chain_name(row.chain_id))
        return holders

    def rank(self, holders: Dict[str, HolderEntry]) -> List[Tuple[str, HolderEntry]]:
        ranked = sorted(holders.items(), key=lambda item: item[1].balance, reverse=True)
        return ranked[:self.top_n]

    def top_holders(self) -> List[Tuple[str, HolderEntry]]:
        # An address's per-chain rows can land on different pages, so ranking
        # happens only after the full scan.
        holders: Dict[str, HolderEntry] = {}
        rows_scanned = 0
        for page in self.account_repository.iter_positive_balances(self.page_size):
            self.merge(holders, page)
            rows_scanned += len(page)

        ranked = self.rank(holders)
        logger.info(
            "Ranked top holders",
            extra={"rows_scanned": rows_scanned, "addresses": len(holders), "ranked": len(ranked)}
        )
        return ranked
