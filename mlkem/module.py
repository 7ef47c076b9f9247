"""Matrices and vectors over R_q as used by ML-KEM."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .ring import Ring


class Module:
    """A matrix of ring elements, optionally viewed through a transpose."""

    __slots__ = ("data", "transpose")

    def __init__(self, data: Iterable[Iterable[Ring]], transpose: bool = False) -> None:
        self.data: tuple[tuple[Ring, ...], ...] = tuple(tuple(row) for row in data)
        self.transpose = transpose

    @classmethod
    def random(cls, m: int, n: int) -> Module:
        """An m x n matrix of random ring elements."""
        return cls(([Ring.random() for _ in range(n)] for _ in range(m)), False)

    def dim(self) -> tuple[int, int]:
        """The (rows, columns) shape as seen through the transpose flag."""
        rows, cols = len(self.data), len(self.data[0])
        return (cols, rows) if self.transpose else (rows, cols)

    def __getitem__(self, index: tuple[int, int]) -> Ring:
        i, j = index
        return self.data[j][i] if self.transpose else self.data[i][j]

    def _rows(self) -> list[list[Ring]]:
        m, n = self.dim()
        return [[self[i, j] for j in range(n)] for i in range(m)]

    def mat_mul(self, rhs: Module) -> Module:
        """Matrix product of self and rhs."""
        m_1, n_1 = self.dim()
        m_2, n_2 = rhs.dim()
        if n_1 != m_2:
            raise ValueError("Invalid dimensions")
        result = []
        for i in range(m_1):
            row = []
            for j in range(n_2):
                acc = Ring.zero()
                for k in range(n_1):
                    acc = acc + self[i, k] * rhs[k, j]
                row.append(acc)
            result.append(row)
        return Module(result, False)

    def dot(self, rhs: Module) -> Ring:
        """Inner product: the transpose of self multiplied by rhs, which must be 1x1."""
        res = Module(self.data, not self.transpose).mat_mul(rhs)
        if res.dim() != (1, 1):
            raise ValueError("Invalid response")
        return res[0, 0]

    def _map(self, func) -> Module:
        return Module(([func(ele) for ele in row] for row in self.data), self.transpose)

    def to_ntt(self) -> Module:
        """Transform every element to the NTT domain."""
        return self._map(Ring.to_ntt)

    def from_ntt(self) -> Module:
        """Transform every element back from the NTT domain."""
        return self._map(Ring.from_ntt)

    def encode(self, d: int) -> bytes:
        """Concatenate the d-bit encodings of every element in storage order."""
        return b"".join(ele.encode(d) for row in self.data for ele in row)

    @classmethod
    def decode_vector(cls, input_bytes: bytes, k: int, d: int, is_ntt: bool = False) -> Module:
        """Decode k polynomials of d-bit coefficients into a column vector."""
        if 256 * d * k != len(input_bytes) * 8:
            raise ValueError("Byte length is the wrong length for given k, d values")
        n = 32 * d
        elements = [
            Ring.decode(input_bytes[i : i + n], d, is_ntt)
            for i in range(0, len(input_bytes), n)
        ]
        return cls([elements], True)

    def compress(self, d: int) -> Module:
        """Compress every element to d bits per coefficient."""
        return self._map(lambda ele: ele.compress(d))

    def decompress(self, d: int) -> Module:
        """Decompress every element from d bits per coefficient."""
        return self._map(lambda ele: ele.decompress(d))

    def __add__(self, other: Module) -> Module:
        if not isinstance(other, Module):
            return NotImplemented
        m, n = self.dim()
        return Module(([self[i, j] + other[i, j] for j in range(n)] for i in range(m)), False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Module):
            return NotImplemented
        return self.data == other.data and self.transpose == other.transpose

    def __hash__(self) -> int:
        return hash((self.data, self.transpose))

    def __repr__(self) -> str:
        rows: Sequence[str] = ["[" + ", ".join(repr(ele) for ele in row) + "]" for row in self.data]
        return "[" + "".join(rows) + "]"