from typing import List

from loguru import logger

from flow_pipeline.storage.constants import PageSizes
from flow_pipeline.storage.models import TransferRow
from flow_pipeline.storage.repositories.base_repository import BaseRepository
from flow_pipeline.utils.decorators import log_errors

RECENT_TRANSFERS_QUERY = """
query RecentTransfers($cutoff: Int!, $limit: Int!, $offset: Int!) {
  Transfer(
    where: { blockTimestamp: { _gte: $cutoff } }
    order_by: [{ blockTimestamp: asc }, { id: asc }]
    limit: $limit
    offset: $offset
  ) {
    chainId
    blockTimestamp
    from
    to
    value
  }
}
"""

TOTAL_COUNT_QUERY = """
query TotalCount {
  Transfer_aggregate {
    aggregate {
      count
    }
  }
}
"""


class TransferRepository(BaseRepository):

    @log_errors
    def fetch_page_since(self, cutoff: int, limit: int, offset: int) -> List[TransferRow]:
        data = self.client.execute(
            RECENT_TRANSFERS_QUERY,
            {"cutoff": int(cutoff), "limit": int(limit), "offset": int(offset)},
        )
        return [TransferRow.model_validate(row) for row in data["Transfer"]]

    def fetch_since(self, cutoff: int, page_size: int = PageSizes.TRANSFERS) -> List[TransferRow]:
        """All transfers with block timestamp >= cutoff, oldest first."""
        transfers: List[TransferRow] = []
        for page in self._paginate(
            lambda limit, offset: self.fetch_page_since(cutoff, limit, offset), page_size
        ):
            transfers.extend(page)
            logger.debug(f"Fetched transfer page of {len(page)} rows ({len(transfers)} total)")

        return transfers

    @log_errors
    def count_total(self) -> int:
        data = self.client.execute(TOTAL_COUNT_QUERY)
        return int(data["Transfer_aggregate"]["aggregate"]["count"])
