from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidParameterError

BLOCKBYTES = 64
OUTBYTES = 32
KEYBYTES = 32
SALTBYTES = 8
PERSONALBYTES = 8
PARAM_BYTES = 32

_MASK_32 = 0xFFFFFFFF
_MASK_48 = 0xFFFFFFFFFFFF


def _pad(value: Optional[bytes], size: int, label: str) -> bytes:
    if value is None:
        return bytes(size)
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{label} must be bytes-like")
    raw = bytes(value)
    if len(raw) > size:
        raise InvalidParameterError(f"{label} must be at most {size} bytes")
    return raw + bytes(size - len(raw))


def _check_range(value: int, low: int, high: int, label: str) -> None:
    if not low <= value <= high:
        raise InvalidParameterError(f"{label} must be in range {low}..{high}, got {value}")


@dataclass(frozen=True)
class ParameterBlock:
    """
    BLAKE2s parameter block.

    Serialized as 32 little-endian bytes and XORed into the IV to seed the
    chaining state. Only sequential mode (fanout=1, depth=1) is used by this
    package; the tree fields are carried so the layout stays complete.
    """

    digest_length: int
    key_length: int = 0
    fanout: int = 1
    depth: int = 1
    leaf_length: int = 0
    node_offset: int = 0
    node_depth: int = 0
    inner_length: int = 0
    salt: bytes = bytes(SALTBYTES)
    personal: bytes = bytes(PERSONALBYTES)

    def __post_init__(self) -> None:
        _check_range(self.digest_length, 1, OUTBYTES, "digest_length")
        _check_range(self.key_length, 0, KEYBYTES, "key_length")
        _check_range(self.fanout, 0, 0xFF, "fanout")
        _check_range(self.depth, 0, 0xFF, "depth")
        _check_range(self.leaf_length, 0, _MASK_32, "leaf_length")
        _check_range(self.node_offset, 0, _MASK_48, "node_offset")
        _check_range(self.node_depth, 0, 0xFF, "node_depth")
        _check_range(self.inner_length, 0, OUTBYTES, "inner_length")
        if len(self.salt) != SALTBYTES:
            raise InvalidParameterError(f"salt must be exactly {SALTBYTES} bytes")
        if len(self.personal) != PERSONALBYTES:
            raise InvalidParameterError(f"personal must be exactly {PERSONALBYTES} bytes")

    def to_bytes(self) -> bytes:
        return b"".join(
            (
                struct.pack(
                    "<BBBBI",
                    self.digest_length,
                    self.key_length,
                    self.fanout,
                    self.depth,
                    self.leaf_length,
                ),
                self.node_offset.to_bytes(6, byteorder="little"),
                struct.pack("<BB", self.node_depth, self.inner_length),
                bytes(self.salt),
                bytes(self.personal),
            )
        )

    def words(self) -> tuple:
        """The block as eight little-endian 32-bit words."""
        return struct.unpack("<8I", self.to_bytes())


def make_param_block(
    digest_length: int,
    key_length: int = 0,
    *,
    salt: Optional[bytes] = None,
    personal: Optional[bytes] = None,
) -> ParameterBlock:
    """
    Build a sequential-mode parameter block.

    Args:
        digest_length: Output size in bytes (1..32)
        key_length: Key size in bytes (0..32), 0 for unkeyed hashing
        salt: Optional salt, zero-padded to 8 bytes
        personal: Optional personalization string, zero-padded to 8 bytes

    Raises:
        InvalidParameterError: If any length is out of range
    """
    return ParameterBlock(
        digest_length=digest_length,
        key_length=key_length,
        salt=_pad(salt, SALTBYTES, "salt"),
        personal=_pad(personal, PERSONALBYTES, "personal"),
    )


__all__ = [
    "BLOCKBYTES",
    "OUTBYTES",
    "KEYBYTES",
    "SALTBYTES",
    "PERSONALBYTES",
    "PARAM_BYTES",
    "ParameterBlock",
    "make_param_block",
]
