"""
Pytest configuration for flow pipeline unit tests.

These fixtures provide an in-memory ledger without external dependencies.
The fake client answers the same GraphQL operations the repositories send,
including limit/offset slicing, so pagination is exercised for real.
"""

from collections import OrderedDict
from datetime import datetime, timezone

import pytest

from flow_pipeline.storage.client import LedgerQueryError
from flow_pipeline.storage.constants import ZERO_ADDRESS

TOKEN = 10 ** 18
TEST_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
DAY = 86400


def derive_accounts(transfers):
    """Account rows as the indexer maintains them: one row per (chain, address)."""
    accounts = OrderedDict()
    for t in transfers:
        value = int(t["value"])
        for address, delta in ((t["from"].lower(), -value), (t["to"].lower(), value)):
            if address == ZERO_ADDRESS:
                continue
            key = (t["chainId"], address)
            row = accounts.setdefault(key, {
                "address": address,
                "chainId": t["chainId"],
                "balance": 0,
                "transferCount": 0,
            })
            row["balance"] += delta
            row["transferCount"] += 1

    return [{**row, "balance": str(row["balance"])} for row in accounts.values()]


class InMemoryLedgerClient:
    """
    Answers the repositories' GraphQL operations from lists of row dicts.

    Rows without an ``id`` get one the way the indexer assigns them. With
    ``shuffle_ties`` the store behaves like an engine without a stable order:
    rows that tie on the sort key come back reversed on every other request
    unless the query breaks ties on ``id``.
    """

    def __init__(self, transfers=None, accounts=None, shuffle_ties=False):
        self.transfers = [
            {"id": f"{i:08d}", **t} for i, t in enumerate(transfers or [])
        ]
        accounts = list(accounts) if accounts is not None else derive_accounts(self.transfers)
        self.accounts = [{"id": f"{a['chainId']}_{a['address']}", **a} for a in accounts]
        self.shuffle_ties = shuffle_ties
        self.calls = []
        self._ordered_requests = 0

    def operations(self, name):
        return [variables for query, variables in self.calls if f"query {name}" in query]

    def execute(self, query, variables=None):
        variables = variables or {}
        self.calls.append((query, variables))

        if "query RecentTransfers" in query:
            rows = self._order(
                (t for t in self.transfers if t["blockTimestamp"] >= variables["cutoff"]),
                key=lambda t: t["blockTimestamp"],
                query=query,
            )
            return {"Transfer": self._slice(rows, variables)}

        if "query TopAccounts" in query:
            rows = self._order(
                (a for a in self.accounts if int(a["balance"]) > 0),
                key=lambda a: -int(a["balance"]),
                query=query,
            )
            return {"Account": self._slice(rows, variables)}

        if "query AccountBalances" in query:
            wanted = set(variables["addresses"])
            return {"Account": [a for a in self.accounts if a["address"] in wanted]}

        if "query TotalCount" in query:
            return {"Transfer_aggregate": {"aggregate": {"count": len(self.transfers)}}}

        raise LedgerQueryError(f"Unsupported query: {query.strip().splitlines()[0]}")

    def _order(self, rows, key, query):
        self._ordered_requests += 1
        if "{ id: asc }" in query:
            return sorted(rows, key=lambda r: (key(r), r["id"]))

        rows = sorted(rows, key=key)
        if self.shuffle_ties and self._ordered_requests % 2 == 0:
            # sorted() is stable, so reversing first flips every run of ties
            rows = sorted(reversed(rows), key=key)
        return rows

    @staticmethod
    def _slice(rows, variables):
        offset = variables.get("offset", 0)
        return rows[offset:offset + variables["limit"]]


def address(n: int) -> str:
    return "0x" + format(n, "040x")


@pytest.fixture
def make_transfer():
    def _make(from_address, to_address, value, block_timestamp, chain_id=1):
        return {
            "chainId": chain_id,
            "blockTimestamp": block_timestamp,
            "from": from_address,
            "to": to_address,
            "value": str(value),
        }

    return _make


@pytest.fixture
def ledger_factory():
    return InMemoryLedgerClient


@pytest.fixture
def addr():
    return address


@pytest.fixture
def test_now():
    return TEST_NOW
