"""
Pure-Python BLAKE2s hashing: one-shot, streaming and keyed.
"""

from .hasher import Blake2s, blake2s
from .errors import Blake2sError, InvalidParameterError, StateFinalizedError
from .params import (
    BLOCKBYTES,
    KEYBYTES,
    OUTBYTES,
    PERSONALBYTES,
    SALTBYTES,
    ParameterBlock,
    make_param_block,
)
from .state import Blake2sState, blake2s_hash, final, init, init_key, init_param, update
from .vectorized import (
    hash_arrow_array,
    hash_pandas_series,
    hash_polars_series,
)

__all__ = [
    "Blake2s",
    "blake2s",
    "blake2s_hash",
    "Blake2sState",
    "init",
    "init_key",
    "init_param",
    "update",
    "final",
    "ParameterBlock",
    "make_param_block",
    "Blake2sError",
    "InvalidParameterError",
    "StateFinalizedError",
    "BLOCKBYTES",
    "OUTBYTES",
    "KEYBYTES",
    "SALTBYTES",
    "PERSONALBYTES",
    "hash_arrow_array",
    "hash_pandas_series",
    "hash_polars_series",
]
