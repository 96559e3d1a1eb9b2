from pathlib import Path

import pytest

from abidec.abi_json import load_interface
from abidec.decoding.registry import ContractInterface

ABI_DIR = Path(__file__).parent / "abi"

# createPool(WETH-like tokenA, WETH, 3000)
# https://etherscan.io/tx/0x535e880ab0d966fbc7a354c322046fe6f01581e94b0d9b76a12683feefb98481
CREATE_POOL_INPUT = (
    "a1671295"
    "000000000000000000000000a0b211418d87c9f5918e6213fec3b13290aa5f26"
    "000000000000000000000000c02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
    "0000000000000000000000000000000000000000000000000000000000000bb8"
)

POOL_CREATED_TOPICS = [
    "0x783cca1c0412dd0d695e784568c96da2e9c22ff989357a2e8b1d9b2b4e6b7118",
    "0x000000000000000000000000a0b211418d87c9f5918e6213fec3b13290aa5f26",
    "0x000000000000000000000000c02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
    "0x0000000000000000000000000000000000000000000000000000000000000bb8",
]
POOL_CREATED_DATA = (
    "0x"
    "000000000000000000000000000000000000000000000000000000000000003c"
    "000000000000000000000000acabbea9c2d0ff835418d139d6a570b5025be085"
)


def word(n: int) -> bytes:
    """One 32-byte big-endian ABI word."""
    return n.to_bytes(32, "big")


def padded(b: bytes) -> bytes:
    """Right-pad to a multiple of 32 bytes."""
    return b + b"\x00" * (-len(b) % 32)


@pytest.fixture
def factory_abi_path() -> Path:
    path = ABI_DIR / "uniswapv3factory_abi.json"
    assert path.is_file()
    return path


@pytest.fixture
def factory(factory_abi_path: Path) -> ContractInterface:
    return load_interface(factory_abi_path)
