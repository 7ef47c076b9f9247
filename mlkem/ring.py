"""Polynomials in Z_q[X]/(X^256 + 1) as used by ML-KEM."""

from __future__ import annotations

import random as _random
from collections.abc import Iterable

Q = 3329
N = 256
ROOT_OF_UNITY = 17
NTT_F = pow(128, -1, Q)  # 3303


def _bit_reverse7(i: int) -> int:
    return int(f"{i:07b}"[::-1], 2)


ZETAS = tuple(pow(ROOT_OF_UNITY, _bit_reverse7(i), Q) for i in range(128))


class Ring:
    """An element of R_q, either in normal form or in the NTT domain."""

    __slots__ = ("coefficients", "is_ntt")

    q = Q
    n = N

    def __init__(self, coefficients: Iterable[int], is_ntt: bool = False) -> None:
        self.coefficients: tuple[int, ...] = tuple(coefficients)
        self.is_ntt = is_ntt

    @classmethod
    def zero(cls) -> Ring:
        """The zero polynomial."""
        return cls([0] * N)

    @classmethod
    def one(cls) -> Ring:
        """The constant polynomial 1."""
        return cls([1] + [0] * (N - 1))

    @classmethod
    def x(cls) -> Ring:
        """The polynomial X."""
        return cls([0, 1] + [0] * (N - 2))

    @classmethod
    def random(cls) -> Ring:
        """A polynomial with coefficients drawn uniformly from 0..255."""
        return cls(_random.randint(0, 255) for _ in range(N))

    def encode(self, d: int) -> bytes:
        """Pack the coefficients into 32*d bytes, d bits each."""
        t = 0
        for c in reversed(self.coefficients[1:]):
            t = (t | c) << d
        t |= self.coefficients[0]
        size = 32 * d
        return (t & ((1 << (8 * size)) - 1)).to_bytes(size, "little")

    @classmethod
    def decode(cls, input_bytes: bytes, d: int, is_ntt: bool = False) -> Ring:
        """Unpack 32*d bytes into a polynomial of d-bit coefficients."""
        if 256 * d != len(input_bytes) * 8:
            raise ValueError("input bytes must be a multiple of (polynomial degree) / 8")
        m = Q if d == 12 else 1 << d
        mask = (1 << d) - 1
        b_int = int.from_bytes(input_bytes, "little")
        coefficients = []
        for _ in range(N):
            coefficients.append((b_int & mask) % m)
            b_int >>= d
        return cls(coefficients, is_ntt)

    def compress(self, d: int) -> Ring:
        """Compress every coefficient to d bits."""
        return Ring((self.compress_ele(c, d) for c in self.coefficients), self.is_ntt)

    def compress_ele(self, x: int, d: int) -> int:
        """Compress a single coefficient to d bits."""
        t = 1 << d
        return ((t * x + 1664) // Q) % t

    def decompress(self, d: int) -> Ring:
        """Decompress every coefficient from d bits."""
        return Ring((self.decompress_ele(c, d) for c in self.coefficients), self.is_ntt)

    def decompress_ele(self, x: int, d: int) -> int:
        """Decompress a single d-bit coefficient."""
        t = 1 << (d - 1)
        return (Q * x + t) >> d

    @classmethod
    def ntt_sample(cls, input_bytes: bytes) -> Ring:
        """Sample a polynomial in the NTT domain by rejection from a byte stream."""
        coefficients: list[int] = []
        for i in range(0, len(input_bytes) - 2, 3):
            a, b, c = input_bytes[i], input_bytes[i + 1], input_bytes[i + 2]
            d_1 = a + 256 * (b % 16)
            d_2 = (b // 16) + 16 * c
            if d_1 < Q:
                coefficients.append(d_1)
            if d_2 < Q and len(coefficients) < N:
                coefficients.append(d_2)
            if len(coefficients) == N:
                return cls(coefficients, True)
        raise ValueError("not enough input bytes to sample a polynomial")

    @classmethod
    def cbd(cls, input_bytes: bytes, eta: int, is_ntt: bool = False) -> Ring:
        """Sample a polynomial from the centered binomial distribution."""
        if eta * 64 != len(input_bytes):
            raise ValueError("Invalid byte length")
        mask_1 = (1 << eta) - 1
        mask_2 = (1 << (2 * eta)) - 1
        b_int = int.from_bytes(input_bytes, "little")
        coefficients = []
        for _ in range(N):
            x = b_int & mask_2
            a = (x & mask_1).bit_count()
            b = ((x >> eta) & mask_1).bit_count()
            coefficients.append((a - b) % Q)
            b_int >>= 2 * eta
        return cls(coefficients, is_ntt)

    def to_ntt(self) -> Ring:
        """Transform to the NTT domain."""
        coeffs = list(self.coefficients)
        k = 1
        length = 128
        while length >= 2:
            for start in range(0, N, 2 * length):
                zeta = ZETAS[k]
                k += 1
                for j in range(start, start + length):
                    t = zeta * coeffs[j + length]
                    coeffs[j + length] = (coeffs[j] - t) % Q
                    coeffs[j] = (coeffs[j] + t) % Q
            length >>= 1
        return Ring(coeffs, True)

    def from_ntt(self) -> Ring:
        """Transform back from the NTT domain."""
        coeffs = list(self.coefficients)
        k = 127
        length = 2
        while length <= 128:
            for start in range(0, N, 2 * length):
                zeta = ZETAS[k]
                k -= 1
                for j in range(start, start + length):
                    t = coeffs[j]
                    coeffs[j] = (t + coeffs[j + length]) % Q
                    coeffs[j + length] = (zeta * (coeffs[j + length] - t)) % Q
            length <<= 1
        return Ring(((c * NTT_F) % Q for c in coeffs), False)

    @staticmethod
    def _ntt_base_mul(a_0: int, a_1: int, b_0: int, b_1: int, zeta: int) -> tuple[int, int]:
        return (a_0 * b_0 + zeta * a_1 * b_1) % Q, (a_1 * b_0 + a_0 * b_1) % Q

    def _ntt_mul(self, other: Ring) -> Ring:
        f, g = self.coefficients, other.coefficients
        out: list[int] = []
        for i in range(64):
            zeta = ZETAS[64 + i]
            base = 4 * i
            out.extend(self._ntt_base_mul(f[base], f[base + 1], g[base], g[base + 1], zeta))
            out.extend(
                self._ntt_base_mul(f[base + 2], f[base + 3], g[base + 2], g[base + 3], Q - zeta)
            )
        return Ring(out, True)

    def _schoolbook_mul(self, other: Ring) -> Ring:
        out = [0] * N
        g = other.coefficients
        for i, a in enumerate(self.coefficients):
            if not a:
                continue
            for j, b in enumerate(g):
                k = i + j
                if k < N:
                    out[k] += a * b
                else:
                    out[k - N] -= a * b
        return Ring((c % Q for c in out), self.is_ntt)

    def __add__(self, other: Ring) -> Ring:
        if not isinstance(other, Ring):
            return NotImplemented
        return Ring(
            ((x + y) % Q for x, y in zip(self.coefficients, other.coefficients)), self.is_ntt
        )

    def __sub__(self, other: Ring) -> Ring:
        if not isinstance(other, Ring):
            return NotImplemented
        return Ring(
            ((x - y) % Q for x, y in zip(self.coefficients, other.coefficients)), self.is_ntt
        )

    def __mul__(self, other: Ring) -> Ring:
        if not isinstance(other, Ring):
            return NotImplemented
        if self.is_ntt and other.is_ntt:
            return self._ntt_mul(other)
        if not self.is_ntt and not other.is_ntt:
            return self._schoolbook_mul(other)
        raise ValueError("Invalid rings")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ring):
            return NotImplemented
        return self.coefficients == other.coefficients and self.is_ntt == other.is_ntt

    def __hash__(self) -> int:
        return hash((self.coefficients, self.is_ntt))

    def __repr__(self) -> str:
        parts = []
        for i, value in enumerate(self.coefficients):
            if not value:
                continue
            coeff = "" if value == 1 else str(value)
            if i == 255:
                parts.append(f"{coeff}x^{i}")
            elif i == 0:
                parts.append(f"{value} + ")
            elif i == 1:
                parts.append(f"{coeff}x + ")
            else:
                parts.append(f"{coeff}x^{i} + ")
        return "".join(parts)