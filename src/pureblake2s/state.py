from __future__ import annotations

import logging
import struct
from typing import List, Optional

from .compress import IV, compress
from .errors import InvalidParameterError, StateFinalizedError
from .params import BLOCKBYTES, KEYBYTES, OUTBYTES, ParameterBlock, make_param_block
from .secure import secure_zero

_logger = logging.getLogger(__name__)

_MASK_32 = 0xFFFFFFFF
_BUFBYTES = 2 * BLOCKBYTES
_DIGEST = struct.Struct("<8I")


def _check_bytes(data, label: str) -> None:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"{label} must be bytes-like")


class Blake2sState:
    """
    Mutable BLAKE2s hashing session.

    Holds the chaining value, the 64-bit byte counter (two 32-bit words), the
    finalization flags and a fixed two-block buffer. One state belongs to one
    session; it is not safe to update it from several threads at once.
    """

    def __init__(self) -> None:
        self.h: List[int] = list(IV)
        self.t: List[int] = [0, 0]
        self.f: List[int] = [0, 0]
        self.buf = bytearray(_BUFBYTES)
        self.buflen = 0
        self.outlen = 0
        self.last_node = False
        self.finalized = False

    @property
    def counter(self) -> int:
        return (self.t[1] << 32) | self.t[0]

    @property
    def buffered(self) -> bytes:
        return bytes(self.buf[: self.buflen])

    def copy(self) -> "Blake2sState":
        dup = self.__class__.__new__(self.__class__)
        dup.h = list(self.h)
        dup.t = list(self.t)
        dup.f = list(self.f)
        dup.buf = bytearray(self.buf)
        dup.buflen = self.buflen
        dup.outlen = self.outlen
        dup.last_node = self.last_node
        dup.finalized = self.finalized
        return dup

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(outlen={self.outlen}, counter={self.counter}, "
            f"buflen={self.buflen}, finalized={self.finalized})"
        )


# State helpers ----------------------------------------------------------
def _increment_counter(state: Blake2sState, inc: int) -> None:
    t0 = (state.t[0] + inc) & _MASK_32
    state.t[0] = t0
    if t0 < inc:
        state.t[1] = (state.t[1] + 1) & _MASK_32


def _set_lastblock(state: Blake2sState) -> None:
    if state.last_node:
        state.f[1] = _MASK_32
    state.f[0] = _MASK_32


def _ensure_active(state: Blake2sState) -> None:
    if state.finalized:
        raise StateFinalizedError("hashing state has already been finalized")


# Initialization ---------------------------------------------------------
def init_param(param: ParameterBlock, *, last_node: bool = False) -> Blake2sState:
    """Create a state whose chaining value is the IV XORed with ``param``."""
    state = Blake2sState()
    for i, word in enumerate(param.words()):
        state.h[i] ^= word
    state.outlen = param.digest_length
    state.last_node = last_node
    return state


def init(
    outlen: int = OUTBYTES,
    *,
    salt: Optional[bytes] = None,
    personal: Optional[bytes] = None,
) -> Blake2sState:
    """
    Start an unkeyed hashing session.

    Raises:
        InvalidParameterError: If outlen is 0 or larger than 32
    """
    param = make_param_block(outlen, 0, salt=salt, personal=personal)
    _logger.debug("blake2s init: outlen=%d keyed=False", outlen)
    return init_param(param)


def init_key(
    outlen: int,
    key: bytes,
    keylen: Optional[int] = None,
    *,
    salt: Optional[bytes] = None,
    personal: Optional[bytes] = None,
) -> Blake2sState:
    """
    Start a keyed hashing session (BLAKE2s as a MAC).

    The key, zero-padded to one block, is absorbed as the first block of
    input. The padded copy is wiped once it has been fed in.

    Args:
        outlen: Digest size in bytes (1..32)
        key: Key material; only the first ``keylen`` bytes are used
        keylen: Key size in bytes (1..32), defaults to the key size in bytes

    Raises:
        InvalidParameterError: If outlen is out of range, the key is missing,
            or keylen is 0, larger than 32 or larger than the key itself
    """
    if key is None:
        raise InvalidParameterError("init_key needs a key")
    _check_bytes(key, "key")
    if keylen is None:
        keylen = memoryview(key).nbytes
    if not 0 < keylen <= KEYBYTES:
        raise InvalidParameterError(f"keylen must be in range 1..{KEYBYTES}, got {keylen}")
    if keylen > memoryview(key).nbytes:
        raise InvalidParameterError("keylen is larger than the supplied key")

    param = make_param_block(outlen, keylen, salt=salt, personal=personal)
    _logger.debug("blake2s init: outlen=%d keyed=True", outlen)
    state = init_param(param)

    block = bytearray(BLOCKBYTES)
    block[:keylen] = memoryview(key).cast("B")[:keylen]
    try:
        update(state, block)
    finally:
        secure_zero(block)
    return state


# Absorb / squeeze -------------------------------------------------------
def update(state: Blake2sState, data) -> Blake2sState:
    """
    Absorb ``data`` into the session.

    Full blocks are compressed only once more input is known to follow, so
    the buffer always keeps at least the last block for :func:`final`.
    """
    _ensure_active(state)
    _check_bytes(data, "data")

    view = memoryview(data).cast("B")
    offset = 0
    remaining = len(view)
    buf = state.buf

    while remaining > 0:
        left = state.buflen
        fill = _BUFBYTES - left

        if remaining > fill:
            buf[left:_BUFBYTES] = view[offset : offset + fill]
            state.buflen += fill
            _increment_counter(state, BLOCKBYTES)
            compress(state.h, state.t, state.f, buf)
            buf[:BLOCKBYTES] = buf[BLOCKBYTES:]
            state.buflen -= BLOCKBYTES
            offset += fill
            remaining -= fill
        else:
            buf[left : left + remaining] = view[offset : offset + remaining]
            state.buflen += remaining
            offset += remaining
            remaining = 0

    return state


def final(state: Blake2sState, outlen: Optional[int] = None) -> bytes:
    """
    Pad and compress the last block, then return the digest.

    The state cannot be used again afterwards.

    Raises:
        InvalidParameterError: If outlen is outside 1..state.outlen
        StateFinalizedError: If the state was already finalized
    """
    _ensure_active(state)
    if outlen is None:
        outlen = state.outlen
    if not 0 < outlen <= state.outlen:
        raise InvalidParameterError(f"outlen must be in range 1..{state.outlen}, got {outlen}")

    buf = state.buf
    if state.buflen > BLOCKBYTES:
        _increment_counter(state, BLOCKBYTES)
        compress(state.h, state.t, state.f, buf)
        state.buflen -= BLOCKBYTES
        buf[: state.buflen] = buf[BLOCKBYTES : BLOCKBYTES + state.buflen]

    _increment_counter(state, state.buflen)
    _set_lastblock(state)

    # padding
    buf[state.buflen :] = bytes(_BUFBYTES - state.buflen)
    compress(state.h, state.t, state.f, buf)
    state.finalized = True

    _logger.debug("blake2s final: outlen=%d counter=%d", outlen, state.counter)
    return _DIGEST.pack(*state.h)[:outlen]


def blake2s_hash(
    data,
    key: Optional[bytes] = None,
    outlen: int = OUTBYTES,
    keylen: Optional[int] = None,
    *,
    out: Optional[bytearray] = None,
) -> bytes:
    """
    One-shot BLAKE2s.

    A missing key (``None``), an empty key or ``keylen=0`` all select
    unkeyed hashing; ``keylen`` is ignored when no key is given.

    Args:
        data: Message to hash
        key: Optional key for keyed hashing
        outlen: Digest size in bytes (1..32)
        keylen: Number of key bytes to use, defaults to the key size in bytes
        out: Optional writable buffer that also receives the digest

    Returns:
        The ``outlen``-byte digest.

    Raises:
        InvalidParameterError: If data is None, ``out`` is too small, or a
            length is out of range
    """
    if data is None:
        raise InvalidParameterError("data must not be None")
    if out is not None and len(out) < outlen:
        raise InvalidParameterError("out buffer is smaller than outlen")

    if key is None:
        keylen = 0
    elif keylen is None:
        _check_bytes(key, "key")
        keylen = memoryview(key).nbytes
    if keylen < 0:
        raise InvalidParameterError(f"keylen must be in range 0..{KEYBYTES}, got {keylen}")

    if keylen > 0:
        state = init_key(outlen, key, keylen)
    else:
        state = init(outlen)

    update(state, data)
    digest = final(state, outlen)
    if out is not None:
        out[:outlen] = digest
    return digest


__all__ = [
    "Blake2sState",
    "init_param",
    "init",
    "init_key",
    "update",
    "final",
    "blake2s_hash",
]
