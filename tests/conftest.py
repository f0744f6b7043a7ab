import sys
from pathlib import Path

import pytest

# Ensure project root is on path for oraclelab imports
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from oraclelab.utils.repro import make_rng


@pytest.fixture
def rng():
    return make_rng(1337)


# No 0x41 ('A') anywhere, so no prefix can end in the filler byte.
SAFE_PREFIX_BYTES = bytes(b for b in range(256) if b != 0x41)


def _controlled_prefix(n: int) -> bytes:
    return bytes(SAFE_PREFIX_BYTES[(i * 7 + 3) % len(SAFE_PREFIX_BYTES)] for i in range(n))


@pytest.fixture
def controlled_prefix():
    """Deterministic n-byte prefixes without the filler byte and without repeated blocks."""
    return _controlled_prefix
