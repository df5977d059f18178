from typing import Callable, Iterator, List, TypeVar

from flow_pipeline.storage.client import LedgerClient

T = TypeVar("T")


class BaseRepository:

    def __init__(self, client: LedgerClient):
        self.client = client

    @staticmethod
    def _paginate(fetch_page: Callable[[int, int], List[T]], page_size: int) -> Iterator[List[T]]:
        """
        Yield pages until one comes back shorter than ``page_size``.

        Each page is requested only after the previous one has been consumed.
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")

        offset = 0
        while True:
            page = fetch_page(page_size, offset)
            yield page
            if len(page) < page_size:
                break
            offset += page_size
