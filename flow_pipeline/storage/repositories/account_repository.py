from typing import Iterator, List, Sequence

from flow_pipeline.storage.constants import PageSizes
from flow_pipeline.storage.models import AccountRow
from flow_pipeline.storage.repositories.base_repository import BaseRepository
from flow_pipeline.utils.decorators import log_errors

TOP_ACCOUNTS_QUERY = """
query TopAccounts($limit: Int!, $offset: Int!) {
  Account(
    where: { balance: { _gt: "0" } }
    order_by: [{ balance: desc }, { id: asc }]
    limit: $limit
    offset: $offset
  ) {
    address
    chainId
    balance
    transferCount
  }
}
"""

ACCOUNT_BALANCES_QUERY = """
query AccountBalances($addresses: [String!]!) {
  Account(where: { address: { _in: $addresses } }) {
    address
    chainId
    balance
    transferCount
  }
}
"""


class AccountRepository(BaseRepository):

    @log_errors
    def fetch_positive_page(self, limit: int, offset: int) -> List[AccountRow]:
        data = self.client.execute(TOP_ACCOUNTS_QUERY, {"limit": int(limit), "offset": int(offset)})
        return [AccountRow.model_validate(row) for row in data["Account"]]

    def iter_positive_balances(self, page_size: int = PageSizes.ACCOUNTS) -> Iterator[List[AccountRow]]:
        """Pages of every account row with a positive balance."""
        return self._paginate(self.fetch_positive_page, page_size)

    @log_errors
    def fetch_by_addresses(self, addresses: Sequence[str]) -> List[AccountRow]:
        if not addresses:
            return []

        data = self.client.execute(
            ACCOUNT_BALANCES_QUERY,
            {"addresses": [address.lower() for address in addresses]},
        )
        return [AccountRow.model_validate(row) for row in data["Account"]]
