from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from flow_pipeline.analyzers.balances.balance_enricher import BalanceEnricher
from flow_pipeline.analyzers.flows.windowed_flow_analyzer import FlowEntry, WindowedFlowAnalyzer
from flow_pipeline.analyzers.holders.top_holder_analyzer import HolderEntry, TopHolderAnalyzer
from flow_pipeline.storage.constants import FLOW_WINDOWS_DAYS, PageSizes, TOP_N
from flow_pipeline.storage.repositories.account_repository import AccountRepository
from flow_pipeline.storage.repositories.address_label_repository import AddressLabelRepository
from flow_pipeline.storage.repositories.transfer_repository import TransferRepository
from flow_pipeline.summary.models import FlowRow, HolderRow, SummaryDocument
from flow_pipeline.utils import calculate_cutoffs
from flow_pipeline.utils.decimal_codec import TOKEN_DECIMALS, to_decimal_string


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_synced_at(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SummaryComposer:
    """
    Builds the summary document from one pass over the ledger.

    Every collaborator is handed in at construction; nothing is cached between
    runs. Only the label directory may fail softly, every store failure
    propagates and aborts the run.
    """

    def __init__(
        self,
        transfer_repository: TransferRepository,
        account_repository: AccountRepository,
        label_repository: AddressLabelRepository,
        top_n: int = TOP_N,
        transfer_page_size: int = PageSizes.TRANSFERS,
        account_page_size: int = PageSizes.ACCOUNTS,
        balance_batch_size: int = PageSizes.ADDRESS_BATCH,
        decimals: int = TOKEN_DECIMALS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.transfer_repository = transfer_repository
        self.label_repository = label_repository
        self.transfer_page_size = transfer_page_size
        self.decimals = decimals
        self.clock = clock or _utc_now

        self.flow_analyzer = WindowedFlowAnalyzer(top_n=top_n)
        self.holder_analyzer = TopHolderAnalyzer(account_repository, top_n=top_n, page_size=account_page_size)
        self.balance_enricher = BalanceEnricher(account_repository, batch_size=balance_batch_size)

    def compose(self) -> SummaryDocument:
        now = int(self.clock().timestamp())
        cutoffs = calculate_cutoffs(FLOW_WINDOWS_DAYS, now)
        widest_cutoff = min(cutoffs.values())

        logger.info(
            "Fetching transfers for widest window",
            extra={"cutoff": widest_cutoff, "window_days": max(FLOW_WINDOWS_DAYS)}
        )
        transfers = self.transfer_repository.fetch_since(widest_cutoff, page_size=self.transfer_page_size)
        logger.info(f"Fetched {len(transfers)} transfers")

        rankings = {
            days: self.flow_analyzer.top_flows(transfers, cutoffs[days])
            for days in FLOW_WINDOWS_DAYS
        }

        logger.info("Fetching top holders")
        top_holders = self.holder_analyzer.top_holders()

        total_transfers = self.transfer_repository.count_total()

        addresses: Dict[str, None] = {}
        for ranked in rankings.values():
            for address, _ in ranked:
                addresses[address] = None

        logger.info(f"Fetching balances for {len(addresses)} addresses")
        balances = self.balance_enricher.resolve(addresses)

        labels = self._load_labels()

        document = SummaryDocument(
            top_7d=self._flow_rows(rankings[7], balances),
            top_30d=self._flow_rows(rankings[30], balances),
            top_holders=self._holder_rows(top_holders),
            labels=labels,
            synced_at=format_synced_at(self.clock()),
            total_transfers=total_transfers,
        )

        logger.success(
            "Composed summary document",
            extra={
                "top_7d": len(document.top_7d),
                "top_30d": len(document.top_30d),
                "top_holders": len(document.top_holders),
                "labels": len(labels),
                "total_transfers": total_transfers,
            }
        )
        return document

    def _load_labels(self) -> Dict[str, str]:
        try:
            return self.label_repository.get_all_labels()
        except (OSError, ValueError) as e:
            logger.bind(labels_path=str(self.label_repository.labels_path)).warning(
                f"Label directory unavailable, proceeding without labels: {e}"
            )
            return {}

    def _flow_rows(self, ranked: List[Tuple[str, FlowEntry]], balances: Dict[str, int]) -> List[FlowRow]:
        return [
            FlowRow(
                address=address,
                inflow=to_decimal_string(entry.inflow, self.decimals),
                outflow=to_decimal_string(entry.outflow, self.decimals),
                net_flow=to_decimal_string(entry.net, self.decimals),
                balance=to_decimal_string(balances.get(address, 0), self.decimals),
                transfer_count=entry.count,
                chains=sorted(entry.chains),
            )
            for address, entry in ranked
        ]

    def _holder_rows(self, ranked: List[Tuple[str, HolderEntry]]) -> List[HolderRow]:
        return [
            HolderRow(
                address=address,
                balance=to_decimal_string(entry.balance, self.decimals),
                transfer_count=entry.transfer_count,
                chains=sorted(entry.chains),
            )
            for address, entry in ranked
        ]
