"""The AES state: a 16-byte block viewed as a 4x4 byte grid.

The grid is filled column-major, so byte ``i`` of a block sits at row
``i % 4`` and column ``i // 4``. The state is kept flat, as a list of 16 ints
with ``index = col * 4 + row``, which keeps every round operation a simple
list comprehension. ``to_grid``/``from_grid`` give the row-major 4x4 view for
inspection and tests.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from typing import List, Sequence

from ..errors import InvalidLength
from .gf import multiply
from .tables import INV_SBOX, SBOX

BLOCK_SIZE = 16

State = List[int]

MIX_MATRIX = (
    (2, 3, 1, 1),
    (1, 2, 3, 1),
    (1, 1, 2, 3),
    (3, 1, 1, 2),
)

INV_MIX_MATRIX = (
    (14, 11, 13, 9),
    (9, 14, 11, 13),
    (13, 9, 14, 11),
    (11, 13, 9, 14),
)


def to_state(block: bytes) -> State:
    if len(block) != BLOCK_SIZE:
        raise InvalidLength(f"AES state requires a {BLOCK_SIZE}-byte block, got {len(block)}")
    return list(block)


def from_state(state: Sequence[int]) -> bytes:
    return bytes(state)


def index(row: int, col: int) -> int:
    """Flat position of grid cell (row, col)."""
    return (col % 4) * 4 + (row % 4)


def to_grid(state: Sequence[int]) -> List[List[int]]:
    """Row-major 4x4 view of a flat column-major state."""
    return [[state[index(r, c)] for c in range(4)] for r in range(4)]


def from_grid(grid: Sequence[Sequence[int]]) -> State:
    return [grid[i % 4][i // 4] for i in range(BLOCK_SIZE)]


# ShiftRows in column-major layout: output cell (r, c) takes input cell (r, c + r).
_SHIFT_ROWS_MAP = [index(i % 4, i // 4 + i % 4) for i in range(BLOCK_SIZE)]
_INV_SHIFT_ROWS_MAP = [index(i % 4, i // 4 - i % 4) for i in range(BLOCK_SIZE)]


def sub_bytes(state: State) -> State:
    return [SBOX[b] for b in state]


def inv_sub_bytes(state: State) -> State:
    return [INV_SBOX[b] for b in state]


def shift_rows(state: State) -> State:
    """Rotate row r left by r positions."""
    return [state[i] for i in _SHIFT_ROWS_MAP]


def inv_shift_rows(state: State) -> State:
    """Rotate row r right by r positions."""
    return [state[i] for i in _INV_SHIFT_ROWS_MAP]


# Products by the matrix coefficients, one 256-entry row per coefficient.
_PRODUCTS = {m: [multiply(m, x) for x in range(256)] for m in (1, 2, 3, 9, 11, 13, 14)}


def _mix(state: State, matrix) -> State:
    """Each output byte is the GF(2^8) dot product of a matrix row and the input column."""
    out = [0] * BLOCK_SIZE
    for c in range(4):
        a0, a1, a2, a3 = state[c * 4:c * 4 + 4]
        for r in range(4):
            m0, m1, m2, m3 = matrix[r]
            out[c * 4 + r] = (
                _PRODUCTS[m0][a0]
                ^ _PRODUCTS[m1][a1]
                ^ _PRODUCTS[m2][a2]
                ^ _PRODUCTS[m3][a3]
            )
    return out


def mix_columns(state: State) -> State:
    return _mix(state, MIX_MATRIX)


def inv_mix_columns(state: State) -> State:
    return _mix(state, INV_MIX_MATRIX)


def add_round_key(state: State, round_key: Sequence[int]) -> State:
    return [s ^ k for s, k in zip(state, round_key)]


# XOR is its own inverse.
inv_add_round_key = add_round_key
