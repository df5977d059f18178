from typing import Dict, List

from pydantic import BaseModel, Field


class FlowRow(BaseModel):
    address: str
    inflow: str
    outflow: str
    net_flow: str
    balance: str = "0"
    transfer_count: int
    chains: List[str]


class HolderRow(BaseModel):
    address: str
    balance: str
    transfer_count: int
    chains: List[str]


class SummaryDocument(BaseModel):
    top_7d: List[FlowRow] = Field(default_factory=list)
    top_30d: List[FlowRow] = Field(default_factory=list)
    top_holders: List[HolderRow] = Field(default_factory=list)
    labels: Dict[str, str] = Field(default_factory=dict)
    synced_at: str
    total_transfers: int
