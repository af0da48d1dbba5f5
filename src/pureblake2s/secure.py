from __future__ import annotations

import ctypes


def secure_zero(buf: bytearray) -> None:
    """
    Overwrite ``buf`` with zeros in place.

    Goes through ``ctypes.memset`` on the buffer's own memory so the bytes
    that held key material are cleared rather than replaced by a new object.
    """
    if not isinstance(buf, bytearray):
        raise TypeError("secure_zero needs a mutable bytearray")
    size = len(buf)
    if not size:
        return
    view = (ctypes.c_char * size).from_buffer(buf)
    try:
        ctypes.memset(ctypes.addressof(view), 0, size)
    finally:
        del view


__all__ = ["secure_zero"]
