from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

from loguru import logger

from flow_pipeline.storage.constants import TOP_N, ZERO_ADDRESS, chain_name
from flow_pipeline.storage.models import TransferRow


@dataclass
class FlowEntry:
    inflow: int = 0
    outflow: int = 0
    count: int = 0
    chains: Set[str] = field(default_factory=set)

    @property
    def net(self) -> int:
        return self.inflow - self.outflow


class WindowedFlowAnalyzer:
    """
    Per-address inflow/outflow totals over a trailing time window.

    Transfers are expected to be the superset fetched once for the widest
    window; narrower windows are derived by filtering on the cutoff.
    Entries are keyed by lowercase address and merged across chains.
    """

    def __init__(self, top_n: int = TOP_N):
        self.top_n = top_n

    def aggregate(self, transfers: Iterable[TransferRow], cutoff: int) -> Dict[str, FlowEntry]:
        flows: Dict[str, FlowEntry] = {}

        for transfer in transfers:
            if transfer.block_timestamp < cutoff:
                continue

            chain = chain_name(transfer.chain_id)

            if transfer.from_address and transfer.from_address != ZERO_ADDRESS:
                entry = flows.setdefault(transfer.from_address, FlowEntry())
                entry.outflow += transfer.value
                entry.count += 1
                entry.chains.add(chain)

            if transfer.to_address and transfer.to_address != ZERO_ADDRESS:
                entry = flows.setdefault(transfer.to_address, FlowEntry())
                entry.inflow += transfer.value
                entry.count += 1
                entry.chains.add(chain)

        return flows

    def rank(self, flows: Dict[str, FlowEntry]) -> List[Tuple[str, FlowEntry]]:
        """Top entries by absolute net flow; ties keep first-seen order."""
        ranked = sorted(flows.items(), key=lambda item: abs(item[1].net), reverse=True)
        return ranked[:self.top_n]

    def top_flows(self, transfers: Iterable[TransferRow], cutoff: int) -> List[Tuple[str, FlowEntry]]:
        flows = self.aggregate(transfers, cutoff)
        ranked = self.rank(flows)
        logger.info(
            "Ranked windowed flows",
            extra={"cutoff": cutoff, "addresses": len(flows), "ranked": len(ranked)}
        )
        return ranked
