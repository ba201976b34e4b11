"""
Byte transform applied to CompositePackageMapper files.

The game stores its composite map as text scrambled by three reversible
stages. Encryption runs XOR, mirror swap, block permutation; decryption runs
the inverse permutation, mirror swap, XOR. Swap and permutation do not
commute, so the order matters.
"""

from typing import Tuple

BLOCK_SIZE = 16

PERMUTATION: Tuple[int, ...] = (12, 6, 9, 4, 3, 14, 1, 10, 13, 2, 7, 15, 0, 8, 5, 11)
"""Source index for each byte of an encrypted 16-byte block."""

XOR_KEY = b"GeneratePackageMapper"


def _xor(buffer: bytearray) -> None:
    size = len(buffer)
    if not size:
        return
    stream = (XOR_KEY * (size // len(XOR_KEY) + 1))[:size]
    mixed = int.from_bytes(buffer, "little") ^ int.from_bytes(stream, "little")
    buffer[:] = mixed.to_bytes(size, "little")


def _mirror_swap(buffer: bytearray) -> None:
    """Swap odd positions from the front with positions walking back from the end.

    The swapped pairs are disjoint, so applying the stage twice is a no-op.
    """
    size = len(buffer)
    if size <= 2:
        return

    pairs = (size // 2 + 1) // 2
    fronts = slice(1, 2 * pairs, 2)
    backs = slice(size - 1, size - 1 - 2 * pairs, -2)
    front_bytes = buffer[fronts]
    buffer[fronts] = buffer[backs]
    buffer[backs] = front_bytes


def _permute_blocks(buffer: bytearray) -> None:
    full = len(buffer) - len(buffer) % BLOCK_SIZE
    source = bytes(buffer[:full])
    for i, src in enumerate(PERMUTATION):
        buffer[i:full:BLOCK_SIZE] = source[src:full:BLOCK_SIZE]


def _unpermute_blocks(buffer: bytearray) -> None:
    full = len(buffer) - len(buffer) % BLOCK_SIZE
    source = bytes(buffer[:full])
    for i, target in enumerate(PERMUTATION):
        buffer[target:full:BLOCK_SIZE] = source[i:full:BLOCK_SIZE]


def encrypt(data: bytes) -> bytes:
    """Scramble plaintext map bytes into the on-disk representation."""
    buffer = bytearray(data)
    _xor(buffer)
    _mirror_swap(buffer)
    _permute_blocks(buffer)
    return bytes(buffer)


def decrypt(data: bytes) -> bytes:
    """Recover plaintext map bytes from the on-disk representation."""
    buffer = bytearray(data)
    _unpermute_blocks(buffer)
    _mirror_swap(buffer)
    _xor(buffer)
    return bytes(buffer)


def decrypt_text(data: bytes) -> str:
    """Decrypt and decode as UTF-8, replacing invalid sequences."""
    return decrypt(data).decode("utf-8", errors="replace")
