from __future__ import annotations

import struct
from typing import List, Sequence

_MASK_32 = 0xFFFFFFFF

IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

SIGMA = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
    (9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13),
    (2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9),
    (12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11),
    (13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10),
    (6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5),
    (10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0),
)

ROUNDS = 10

_BLOCK = struct.Struct("<16I")


def rotr32(x: int, n: int) -> int:
    """Rotate right for 32-bit values."""
    return ((x >> n) | (x << (32 - n))) & _MASK_32


def _g(v: List[int], a: int, b: int, c: int, d: int, x: int, y: int) -> None:
    va, vb, vc, vd = v[a], v[b], v[c], v[d]

    va = (va + vb + x) & _MASK_32
    vd = rotr32(vd ^ va, 16)
    vc = (vc + vd) & _MASK_32
    vb = rotr32(vb ^ vc, 12)

    va = (va + vb + y) & _MASK_32
    vd = rotr32(vd ^ va, 8)
    vc = (vc + vd) & _MASK_32
    vb = rotr32(vb ^ vc, 7)

    v[a], v[b], v[c], v[d] = va, vb, vc, vd


def compress(h: List[int], t: Sequence[int], f: Sequence[int], block) -> None:
    """
    Mix one 64-byte block into the chaining value ``h`` in place.

    Only the first 64 bytes of ``block`` are read, so the front half of the
    two-block state buffer can be passed directly.
    """
    if len(block) < _BLOCK.size:
        raise ValueError("compress needs a full 64-byte block")

    m = _BLOCK.unpack_from(block)
    v = list(h)
    v.extend(IV[:4])
    v.append(t[0] ^ IV[4])
    v.append(t[1] ^ IV[5])
    v.append(f[0] ^ IV[6])
    v.append(f[1] ^ IV[7])

    for s in SIGMA:
        # columns
        _g(v, 0, 4, 8, 12, m[s[0]], m[s[1]])
        _g(v, 1, 5, 9, 13, m[s[2]], m[s[3]])
        _g(v, 2, 6, 10, 14, m[s[4]], m[s[5]])
        _g(v, 3, 7, 11, 15, m[s[6]], m[s[7]])
        # diagonals
        _g(v, 0, 5, 10, 15, m[s[8]], m[s[9]])
        _g(v, 1, 6, 11, 12, m[s[10]], m[s[11]])
        _g(v, 2, 7, 8, 13, m[s[12]], m[s[13]])
        _g(v, 3, 4, 9, 14, m[s[14]], m[s[15]])

    for i in range(8):
        h[i] = h[i] ^ v[i] ^ v[i + 8]


__all__ = ["IV", "SIGMA", "ROUNDS", "rotr32", "compress"]
