from __future__ import annotations

from .params import BLOCKBYTES, OUTBYTES
from .state import Blake2sState, final, init, init_key, update


class Blake2s:
    """
    Pure-Python BLAKE2s with a streaming API.

    The interface mirrors hashlib-style objects: ``update`` can be called any
    number of times and ``digest`` can be read at any point without ending
    the session.
    """

    name = "blake2s"
    block_size = BLOCKBYTES

    def __init__(
        self,
        data: bytes = b"",
        *,
        digest_size: int = OUTBYTES,
        key: bytes = b"",
        salt: bytes = b"",
        person: bytes = b"",
    ):
        if not isinstance(key, (bytes, bytearray, memoryview)):
            raise TypeError("key must be bytes-like")

        if memoryview(key).nbytes:
            self._state = init_key(digest_size, key, salt=salt, personal=person)
        else:
            self._state = init(digest_size, salt=salt, personal=person)
        self.digest_size = digest_size

        if data:
            self.update(data)

    def copy(self) -> "Blake2s":
        dup = self.__class__.__new__(self.__class__)
        dup._state = self._state.copy()
        dup.digest_size = self.digest_size
        return dup

    def update(self, data: bytes) -> "Blake2s":
        update(self._state, data)
        return self

    def digest(self) -> bytes:
        return final(self._state.copy())

    def hexdigest(self) -> str:
        return self.digest().hex()

    @property
    def state(self) -> Blake2sState:
        return self._state


def blake2s(data: bytes = b"", **kwargs) -> Blake2s:
    """Convenience constructor matching hashlib-style usage."""
    return Blake2s(data, **kwargs)


__all__ = ["Blake2s", "blake2s"]
