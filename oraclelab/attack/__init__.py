from .cryptanalysis import (
    AttackResult,
    ForgeryResult,
    break_ecb,
    detect_mode,
    discover_block_size,
    find_adjacent_match,
    fixed_length,
    forge_record,
    frequency_alphabet,
    guess_prefix_length,
    is_ecb,
    recover_secret,
    sequential_alphabet,
)
from .oracle import (
    CbcOracle,
    CountingOracle,
    EcbOracle,
    FunctionOracle,
    Oracle,
    ProfileOracle,
    random_encrypt,
)

__all__ = [
    "AttackResult",
    "ForgeryResult",
    "break_ecb",
    "detect_mode",
    "discover_block_size",
    "find_adjacent_match",
    "fixed_length",
    "forge_record",
    "frequency_alphabet",
    "guess_prefix_length",
    "is_ecb",
    "recover_secret",
    "sequential_alphabet",
    "CbcOracle",
    "CountingOracle",
    "EcbOracle",
    "FunctionOracle",
    "Oracle",
    "ProfileOracle",
    "random_encrypt",
]
