from __future__ import annotations

from typing import Any

from .params import OUTBYTES
from .state import blake2s_hash


def _hex_digest(value: Any, key: bytes, digest_size: int) -> str:
    if isinstance(value, str):
        value = value.encode("utf-8")
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"Unsupported type for BLAKE2s hashing: {type(value)!r}")
    return blake2s_hash(value, key=key or None, outlen=digest_size).hex()


def hash_pandas_series(series: Any, key: bytes = b"", digest_size: int = OUTBYTES):
    """
    Hash each element of a pandas Series into a Series of hex digests.
    """
    try:
        import pandas as pd  # type: ignore
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise ImportError(
            "Install pandas to use hash_pandas_series: pip install pandas"
        ) from exc

    hashes = [_hex_digest(val, key, digest_size) for val in series]
    return pd.Series(hashes, index=getattr(series, "index", None), dtype=object)


def hash_arrow_array(array: Any, key: bytes = b"", digest_size: int = OUTBYTES):
    """
    Hash a pyarrow Array (or values coercible to one) into a string Array of hex digests.
    """
    try:
        import pyarrow as pa  # type: ignore
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise ImportError(
            "Install pyarrow to use hash_arrow_array: pip install pyarrow"
        ) from exc

    arr = array if hasattr(array, "to_pylist") else pa.array(array)
    hashes = [
        _hex_digest(val.as_py() if hasattr(val, "as_py") else val, key, digest_size)
        for val in arr
    ]
    return pa.array(hashes, type=pa.string())


def hash_polars_series(series: Any, key: bytes = b"", digest_size: int = OUTBYTES):
    """
    Hash a polars Series into a Utf8 Series of hex digests.
    """
    try:
        import polars as pl  # type: ignore
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise ImportError(
            "Install polars to use hash_polars_series: pip install polars"
        ) from exc

    ser = series if hasattr(series, "dtype") else pl.Series(series)
    hashes = [_hex_digest(val, key, digest_size) for val in ser]
    name = getattr(ser, "name", None) or "blake2s"
    return pl.Series(name=name, values=hashes, dtype=pl.Utf8)


__all__ = ["hash_arrow_array", "hash_pandas_series", "hash_polars_series"]
