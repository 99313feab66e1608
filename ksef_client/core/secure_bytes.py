"""Zeroable byte buffer for key material that must not outlive its session."""

import ctypes
import hmac
import secrets
import warnings
from collections.abc import Iterator
from typing import Self


def _secure_zero(data: bytearray) -> None:
    if len(data) == 0:
        return
    try:
        address = ctypes.addressof((ctypes.c_char * len(data)).from_buffer(data))
        ctypes.memset(address, 0, len(data))
    except (TypeError, ValueError, BufferError) as exc:
        warnings.warn(f"ctypes.memset failed, using fallback: {exc}", RuntimeWarning)
        for i in range(len(data)):
            data[i] = 0


class SecureBytes:
    """
    Bytes container that wipes its buffer on ``clear()``.

    Holds the AES key of a session envelope. Once cleared, any attempt to read
    the content raises ``RuntimeError``.
    """

    __slots__ = ("_data", "_cleared")

    def __init__(self, data: bytes | bytearray) -> None:
        self._data = bytearray(data)
        self._cleared = False

    def __del__(self) -> None:
        self.clear()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.clear()

    def clear(self) -> None:
        """Zero memory. Idempotent."""
        if self._cleared:
            return
        _secure_zero(self._data)
        self._cleared = True

    def __bytes__(self) -> bytes:
        """Warning: creates an unmanaged copy."""
        self._check_cleared()
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return not self._cleared and len(self._data) > 0

    def __repr__(self) -> str:
        if self._cleared:
            return "SecureBytes(<cleared>)"
        return f"SecureBytes(<{len(self._data)} bytes>)"

    def __eq__(self, other: object) -> bool:
        """Constant-time comparison."""
        if isinstance(other, SecureBytes):
            if self._cleared or other._cleared:
                return False
            return hmac.compare_digest(self._data, other._data)
        if isinstance(other, (bytes, bytearray)):
            if self._cleared:
                return False
            return hmac.compare_digest(self._data, other)
        return NotImplemented

    def __hash__(self) -> int:
        raise TypeError("SecureBytes is not hashable")

    def __iter__(self) -> Iterator[int]:
        self._check_cleared()
        return iter(self._data)

    @property
    def is_cleared(self) -> bool:
        return self._cleared

    def _check_cleared(self) -> None:
        if self._cleared:
            raise RuntimeError("SecureBytes has been cleared")

    @classmethod
    def random(cls, size: int) -> Self:
        """Create a buffer filled from the OS CSPRNG."""
        if size <= 0:
            msg = "size must be positive"
            raise ValueError(msg)
        return cls(secrets.token_bytes(size))
