"""
Flow, holder and balance aggregation over the ledger store.
"""

from flow_pipeline.analyzers.balances.balance_enricher import BalanceEnricher
from flow_pipeline.analyzers.flows.windowed_flow_analyzer import FlowEntry, WindowedFlowAnalyzer
from flow_pipeline.analyzers.holders.top_holder_analyzer import HolderEntry, TopHolderAnalyzer

__all__ = [
    "BalanceEnricher",
    "FlowEntry",
    "WindowedFlowAnalyzer",
    "HolderEntry",
    "TopHolderAnalyzer",
]
