ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class ChainIds:
    ETHEREUM = 1
    GNOSIS = 100


CHAIN_NAMES = {
    ChainIds.ETHEREUM: "ethereum",
    ChainIds.GNOSIS: "gnosis",
}


def chain_name(chain_id: int) -> str:
    return CHAIN_NAMES.get(chain_id, f"chain_{chain_id}")


class PageSizes:
    TRANSFERS = 10000
    ACCOUNTS = 5000
    ADDRESS_BATCH = 500


TOP_N = 50
FLOW_WINDOWS_DAYS = (7, 30)
