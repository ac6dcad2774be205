"""Handling of private key material in memory.

Serialized private keys and generated secrets live in mutable buffers that
are wiped once the caller is done with them. Random bytes for symmetric JWK
material come from an injectable source so tests can pin them.
"""

import ctypes
import random
import secrets
from contextlib import contextmanager
from typing import Generator, Protocol


def secure_zero(data: bytearray) -> None:
    """Overwrite ``data`` with zeros in place via ``ctypes.memset``.

    Copies made earlier by the interpreter or by cryptography are out of
    reach; only this buffer is wiped.
    """
    if not isinstance(data, bytearray):
        raise TypeError("secure_zero requires a bytearray, not bytes")
    if data:
        view = (ctypes.c_char * len(data)).from_buffer(data)
        ctypes.memset(ctypes.addressof(view), 0, len(data))


class SecureBytes:
    """Owned copy of sensitive bytes, zeroed on exit or deletion.

    The key codec returns serialized private keys in this wrapper. Leaving
    the ``with`` block wipes the buffer, including when the block raises.

    Example:
        with codec.encode_private_key(key, fmt) as encoded:
            write(encoded.data)
    """

    def __init__(self, data: bytes | bytearray):
        self._data = bytearray(data)
        self._cleared = False

    def _check(self) -> None:
        if self._cleared:
            raise ValueError("SecureBytes has been cleared")

    @property
    def data(self) -> bytearray:
        self._check()
        return self._data

    @property
    def cleared(self) -> bool:
        return self._cleared

    def __bytes__(self) -> bytes:
        # Immutable copy that cannot be wiped; callers at the HTTP edge only
        self._check()
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        if not self._cleared:
            secure_zero(self._data)
            self._cleared = True

    def __enter__(self) -> "SecureBytes":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.clear()

    def __del__(self) -> None:
        self.clear()


@contextmanager
def temporary_key(key_bytes: bytes | bytearray) -> Generator[bytearray, None, None]:
    """Yield a bytearray copy of ``key_bytes`` that is zeroed afterwards.

    Example:
        with temporary_key(raw_secret) as key:
            jwk["k"] = b64url(key)
    """
    buffer = bytearray(key_bytes)
    try:
        yield buffer
    finally:
        secure_zero(buffer)


class RandomSource(Protocol):
    """Provider of random bytes passed into key generation."""

    def token_bytes(self, n: int) -> bytes:
        ...


class SystemRandomSource:
    """Operating system CSPRNG (``secrets``). Safe to share across threads."""

    def token_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)


class SeededRandomSource:
    """Deterministic source for tests. Never use for real key material."""

    def __init__(self, seed: int):
        self._rng = random.Random(seed)

    def token_bytes(self, n: int) -> bytes:
        return self._rng.randbytes(n)


system_random = SystemRandomSource()
