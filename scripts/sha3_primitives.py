#!/usr/bin/env python3
"""Keccak-f[1600] permutation, sponge construction and SHA-3 digests."""
from __future__ import annotations

import argparse
import json
import sys
from typing import Callable, Dict, Iterable, List, Optional, Sequence

__all__ = [
    "bytes_to_bits",
    "bits_to_bytes",
    "sha3_224",
    "sha3_256",
    "sha3_384",
    "sha3_512",
    "sha3_digest",
    "sha3_hex",
    "SHA3_VARIANTS",
]

Bits = List[bool]

STATE_BITS = 1600
LANE_BITS = 64
ROUNDS = 24
_MASK_64 = (1 << LANE_BITS) - 1

# Indexed [x][y].
ROTATION_OFFSETS: Sequence[Sequence[int]] = (
    (0, 36, 3, 41, 18),
    (1, 44, 10, 45, 2),
    (62, 6, 43, 15, 61),
    (28, 55, 25, 21, 56),
    (27, 20, 39, 8, 14),
)

SHA3_VARIANTS: Dict[str, int] = {
    "sha3-224": 224,
    "sha3-256": 256,
    "sha3-384": 384,
    "sha3-512": 512,
}
_DOMAIN_SUFFIX: Bits = [False, True]

_CANONICAL_VECTORS = (
    {
        "name": "sha3-224/empty",
        "variant": "sha3-224",
        "input_hex": "",
        "digest_hex": "6b4e03423667dbb73b6e15454f0eb1abd4597f9a1b078e3f5b5a6bc7",
    },
    {
        "name": "sha3-256/empty",
        "variant": "sha3-256",
        "input_hex": "",
        "digest_hex": "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a",
    },
    {
        "name": "sha3-384/empty",
        "variant": "sha3-384",
        "input_hex": "",
        "digest_hex": "0c63a75b845e4f7d01107d852e4c2485c51a50aaaa94fc61995e71bbee983a2a"
        "c3713831264adb47fb6bd1e058d5f004",
    },
    {
        "name": "sha3-512/empty",
        "variant": "sha3-512",
        "input_hex": "",
        "digest_hex": "a69f73cca23a9ac5c8b567dc185a756e97c982164fe25859e0d1dcc1475c80a6"
        "15b2123af1f5f94c11e3e9402c3ac558f500199d95b6d3e301758586281dcd26",
    },
    {
        "name": "sha3-224/abc",
        "variant": "sha3-224",
        "input_hex": "616263",
        "digest_hex": "e642824c3f8cf24ad09234ee7d3c766fc9a3a5168d0c94ad73b46fdf",
    },
    {
        "name": "sha3-256/abc",
        "variant": "sha3-256",
        "input_hex": "616263",
        "digest_hex": "3a985da74fe225b2045c172d6bd390bd855f086e3e9d525b46bfe24511431532",
    },
    {
        "name": "sha3-384/abc",
        "variant": "sha3-384",
        "input_hex": "616263",
        "digest_hex": "ec01498288516fc926459f58e2c6ad8df9b473cb0fc08c2596da7cf0e49be4b2"
        "98d88cea927ac7f539f1edf228376d25",
    },
    {
        "name": "sha3-512/abc",
        "variant": "sha3-512",
        "input_hex": "616263",
        "digest_hex": "b751850b1a57168a5693cd924b6b096e08f621827444f70d884f5d0240d2712e"
        "10e116e9192af3c91a7ec57647e3934057340b4cf408d5a56592f8274eec53f0",
    },
)


def bytes_to_bits(data: bytes, bit_count: Optional[int] = None) -> Bits:
    """Expand *data* into bits, least significant bit of each byte first.

    When *bit_count* is given only that many leading bits are returned.
    """
    bits = [bool((byte >> i) & 1) for byte in data for i in range(8)]
    if bit_count is None:
        return bits
    if bit_count < 0 or bit_count > len(bits):
        raise ValueError(f"bit count {bit_count} out of range for {len(data)} bytes")
    return bits[:bit_count]


def bits_to_bytes(bits: Sequence[bool]) -> bytes:
    if len(bits) % 8:
        raise ValueError(f"bit stream length {len(bits)} is not a multiple of 8")
    out = bytearray(len(bits) // 8)
    for i, bit in enumerate(bits):
        if bit:
            out[i // 8] |= 1 << (i % 8)
    return bytes(out)


class KeccakState:
    """The 5x5x64 Keccak state, held as 25 lanes of 64-bit integers.

    Bit ``(x, y, z)`` is bit ``z`` of ``lanes[x][y]``; its position in the
    flat bit layout is ``64 * (x + 5 * y) + z``.
    """

    def __init__(self) -> None:
        self.lanes = [[0] * 5 for _ in range(5)]

    def get(self, x: int, y: int, z: int) -> bool:
        return bool((self.lanes[x % 5][y % 5] >> (z % LANE_BITS)) & 1)

    def set(self, x: int, y: int, z: int, bit: bool) -> None:
        x, y, z = x % 5, y % 5, z % LANE_BITS
        if bit:
            self.lanes[x][y] |= 1 << z
        else:
            self.lanes[x][y] &= ~(1 << z) & _MASK_64

    def xor(self, x: int, y: int, z: int, bit: bool) -> None:
        if bit:
            self.lanes[x % 5][y % 5] ^= 1 << (z % LANE_BITS)

    def xor_bits(self, bits: Sequence[bool]) -> None:
        if len(bits) > STATE_BITS:
            raise ValueError(f"cannot absorb {len(bits)} bits into a {STATE_BITS}-bit state")
        for offset in range(0, len(bits), LANE_BITS):
            lane = 0
            for z, bit in enumerate(bits[offset : offset + LANE_BITS]):
                if bit:
                    lane |= 1 << z
            index = offset // LANE_BITS
            self.lanes[index % 5][index // 5] ^= lane

    def to_bits(self, count: int = STATE_BITS) -> Bits:
        bits: Bits = []
        for index in range((count + LANE_BITS - 1) // LANE_BITS):
            lane = self.lanes[index % 5][index // 5]
            bits.extend(bool((lane >> z) & 1) for z in range(LANE_BITS))
        return bits[:count]

    def copy(self) -> "KeccakState":
        clone = KeccakState()
        clone.lanes = [list(column) for column in self.lanes]
        return clone


def _rotl(value: int, offset: int) -> int:
    offset &= 63
    return ((value << offset) & _MASK_64) | ((value & _MASK_64) >> (64 - offset))


def rc(t: int) -> bool:
    """Output bit of the x^8 + x^6 + x^5 + x^4 + 1 LFSR after ``t`` steps."""
    register = 1
    for _ in range(t % 255):
        register <<= 1
        if register & 0x100:
            register ^= 0x171
    return bool(register & 1)


def round_constant(round_index: int) -> int:
    lane = 0
    for j in range(7):
        if rc(j + 7 * round_index):
            lane |= 1 << ((1 << j) - 1)
    return lane


ROUND_CONSTANTS: Sequence[int] = tuple(round_constant(i) for i in range(ROUNDS))


def theta(state: KeccakState) -> None:
    a = state.lanes
    c = [a[x][0] ^ a[x][1] ^ a[x][2] ^ a[x][3] ^ a[x][4] for x in range(5)]
    for x in range(5):
        d = c[(x - 1) % 5] ^ _rotl(c[(x + 1) % 5], 1)
        for y in range(5):
            a[x][y] ^= d


def rho(state: KeccakState) -> None:
    for x in range(5):
        for y in range(5):
            state.lanes[x][y] = _rotl(state.lanes[x][y], ROTATION_OFFSETS[x][y])


def pi(state: KeccakState) -> None:
    moved = [[0] * 5 for _ in range(5)]
    for x in range(5):
        for y in range(5):
            moved[y][(2 * x + 3 * y) % 5] = state.lanes[x][y]
    state.lanes = moved


def chi(state: KeccakState) -> None:
    a = state.lanes
    state.lanes = [
        [(a[x][y] ^ ((~a[(x + 1) % 5][y]) & a[(x + 2) % 5][y])) & _MASK_64 for y in range(5)]
        for x in range(5)
    ]


def iota(state: KeccakState, round_index: int) -> None:
    state.lanes[0][0] ^= ROUND_CONSTANTS[round_index]


def keccak_round(state: KeccakState, round_index: int) -> None:
    theta(state)
    rho(state)
    pi(state)
    chi(state)
    iota(state, round_index)


def keccak_f(state: KeccakState) -> KeccakState:
    """Apply all 24 rounds of Keccak-f[1600] in place and return *state*."""
    for round_index in range(ROUNDS):
        keccak_round(state, round_index)
    return state


def pad101(bits: Sequence[bool], rate: int) -> Bits:
    """Append the multi-rate pad10*1 so the result is a multiple of *rate*."""
    if rate <= 0:
        raise ValueError(f"rate must be positive, got {rate}")
    zeros = (-len(bits) - 2) % rate
    return list(bits) + [True] + [False] * zeros + [True]


def sponge(
    f: Callable[[KeccakState], KeccakState],
    pad: Callable[[Sequence[bool], int], Bits],
    rate: int,
    bits: Sequence[bool],
    output_bits: int,
) -> Bits:
    if not 0 < rate < STATE_BITS:
        raise ValueError(f"rate must be in (0, {STATE_BITS}), got {rate}")
    if output_bits < 0:
        raise ValueError(f"output length must be non-negative, got {output_bits}")
    padded = pad(bits, rate)
    if len(padded) % rate or len(padded) < len(bits) + 2:
        raise RuntimeError(f"padding produced {len(padded)} bits for rate {rate}")

    state = KeccakState()
    for offset in range(0, len(padded), rate):
        state.xor_bits(padded[offset : offset + rate])
        state = f(state)

    output: Bits = state.to_bits(rate)
    while len(output) < output_bits:
        state = f(state)
        output.extend(state.to_bits(rate))
    return output[:output_bits]


def keccak(capacity: int, bits: Sequence[bool], output_bits: int) -> Bits:
    """Keccak[c]: the sponge over Keccak-f[1600] with pad10*1 and rate 1600 - c."""
    return sponge(keccak_f, pad101, STATE_BITS - capacity, bits, output_bits)


def _sha3(data: bytes, output_bits: int) -> bytes:
    bits = bytes_to_bits(data) + _DOMAIN_SUFFIX
    digest = bits_to_bytes(keccak(2 * output_bits, bits, output_bits))
    if len(digest) * 8 != output_bits:
        raise RuntimeError(f"digest is {len(digest)} bytes, expected {output_bits // 8}")
    return digest


def sha3_224(data: bytes) -> bytes:
    """Compute the SHA3-224 digest (28 bytes) of *data*."""
    return _sha3(data, 224)


def sha3_256(data: bytes) -> bytes:
    """Compute the SHA3-256 digest (32 bytes) of *data*."""
    return _sha3(data, 256)


def sha3_384(data: bytes) -> bytes:
    """Compute the SHA3-384 digest (48 bytes) of *data*."""
    return _sha3(data, 384)


def sha3_512(data: bytes) -> bytes:
    """Compute the SHA3-512 digest (64 bytes) of *data*."""
    return _sha3(data, 512)


def sha3_digest(variant: str, data: bytes) -> bytes:
    try:
        output_bits = SHA3_VARIANTS[variant]
    except KeyError:
        raise ValueError(f"unknown SHA-3 variant: {variant!r}") from None
    return _sha3(data, output_bits)


def sha3_hex(variant: str, data: bytes) -> str:
    return sha3_digest(variant, data).hex()


def run_self_test() -> None:
    for vector in _CANONICAL_VECTORS:
        msg = bytes.fromhex(vector["input_hex"])
        expected = vector["digest_hex"]
        digest = sha3_hex(vector["variant"], msg)
        if digest != expected:
            raise RuntimeError(
                f"SHA-3 self-test failed for {vector['name']}: {digest} != {expected}"
            )


def _dump_vectors() -> str:
    return json.dumps(_CANONICAL_VECTORS, separators=(",", ":"), sort_keys=True)


def _build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SHA-3 helper utilities")
    sub = parser.add_subparsers(dest="command", required=True)

    digest_parser = sub.add_parser("digest", help="Read stdin and emit a SHA-3 hex digest")
    digest_parser.add_argument(
        "--variant",
        choices=sorted(SHA3_VARIANTS),
        default="sha3-256",
        help="Digest to compute (default: sha3-256)",
    )
    sub.add_parser("self-test", help="Run internal test vectors")
    sub.add_parser("vectors", help="Emit canonical SHA-3 vector JSON")
    return parser


def _cmd_digest(variant: str) -> int:
    data = sys.stdin.buffer.read()
    sys.stdout.write(sha3_hex(variant, data))
    return 0


def _cmd_self_test() -> int:
    try:
        run_self_test()
    except RuntimeError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    sys.stdout.write("ok\n")
    return 0


def _cmd_vectors() -> int:
    sys.stdout.write(_dump_vectors())
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_cli()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.command == "digest":
        return _cmd_digest(args.variant)
    if args.command == "self-test":
        return _cmd_self_test()
    if args.command == "vectors":
        return _cmd_vectors()
    parser.error("unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
