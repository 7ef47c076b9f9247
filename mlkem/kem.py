"""The ML-KEM key encapsulation mechanism built on R_q modules."""

from __future__ import annotations

import hashlib
import secrets
from enum import Enum

from .module import Module
from .ring import Ring


class MLKemError(ValueError):
    """Raised when a key, ciphertext or message fails a type or integrity check."""


class ParameterSet(Enum):
    """The three standard ML-KEM parameter sets: (k, eta_1, eta_2, du, dv)."""

    ML_KEM_512 = (2, 3, 2, 10, 4)
    ML_KEM_768 = (3, 2, 2, 10, 4)
    ML_KEM_1024 = (4, 2, 2, 11, 5)

    def __init__(self, k: int, eta_1: int, eta_2: int, du: int, dv: int) -> None:
        self.k = k
        self.eta_1 = eta_1
        self.eta_2 = eta_2
        self.du = du
        self.dv = dv


def _g(s: bytes) -> tuple[bytes, bytes]:
    digest = hashlib.sha3_512(s).digest()
    return digest[:32], digest[32:]


def _h(s: bytes) -> bytes:
    return hashlib.sha3_256(s).digest()


def _j(s: bytes) -> bytes:
    return hashlib.shake_256(s).digest(32)


def _xof(seed: bytes, i: int, j: int) -> bytes:
    return hashlib.shake_128(seed + bytes((i, j))).digest(840)


def _prf(eta: int, s: bytes, b: int) -> bytes:
    return hashlib.shake_256(s + bytes((b,))).digest(eta * 64)


def select_bytes(a: bytes, b: bytes, cond: bool) -> bytes:
    """Return b when cond is true and a otherwise, without branching per byte."""
    if len(b) < len(a):
        raise ValueError("second byte string is shorter than the first")
    mask = 0xFF if cond else 0x00
    return bytes(x ^ (mask & (x ^ y)) for x, y in zip(a, b))


class MLKem:
    """ML-KEM key generation, encapsulation and decapsulation for one parameter set."""

    def __init__(self, parameter_set: ParameterSet) -> None:
        self.parameter_set = parameter_set
        self.k = parameter_set.k
        self.eta_1 = parameter_set.eta_1
        self.eta_2 = parameter_set.eta_2
        self.du = parameter_set.du
        self.dv = parameter_set.dv

    def __repr__(self) -> str:
        return f"MLKem({self.parameter_set.name})"

    @property
    def ek_size(self) -> int:
        """Length in bytes of an encapsulation key."""
        return 384 * self.k + 32

    @property
    def dk_size(self) -> int:
        """Length in bytes of a decapsulation key."""
        return 768 * self.k + 96

    @property
    def ciphertext_size(self) -> int:
        """Length in bytes of a ciphertext."""
        return 32 * (self.du * self.k + self.dv)

    def keygen(self) -> tuple[bytes, bytes]:
        """Generate a fresh (encapsulation key, decapsulation key) pair."""
        return self.keygen_internal(secrets.token_bytes(32), secrets.token_bytes(32))

    def encaps(self, ek: bytes) -> tuple[bytes, bytes]:
        """Produce a (shared secret, ciphertext) pair for the encapsulation key."""
        return self.encaps_internal(ek, secrets.token_bytes(32))

    def decaps(self, dk: bytes, c: bytes) -> bytes:
        """Recover the shared secret from a ciphertext with the decapsulation key."""
        return self.decaps_internal(dk, c)

    def keygen_internal(self, d: bytes, z: bytes) -> tuple[bytes, bytes]:
        """Deterministic key generation from the seeds d and z."""
        ek, dk_pke = self._k_pke_keygen(d)
        dk = dk_pke + ek + _h(ek) + bytes(z)
        return ek, dk

    def encaps_internal(self, ek: bytes, m: bytes) -> tuple[bytes, bytes]:
        """Deterministic encapsulation of the 32-byte message m."""
        if len(m) != 32:
            raise MLKemError("message must be 32 bytes long")
        key, r = _g(bytes(m) + _h(ek))
        c = self._k_pke_encrypt(ek, m, r)
        return key, c

    def decaps_internal(self, dk: bytes, c: bytes) -> bytes:
        """Decapsulation with implicit rejection of invalid ciphertexts."""
        k = self.k
        if len(c) != self.ciphertext_size:
            raise MLKemError("ciphertext type check failed")
        if len(dk) != self.dk_size:
            raise MLKemError("decapsulation key type check failed")

        dk_pke = dk[: 384 * k]
        ek_pke = dk[384 * k : 768 * k + 32]
        h = dk[768 * k + 32 : 768 * k + 64]
        z = dk[768 * k + 64 :]

        if _h(ek_pke) != h:
            raise MLKemError("hash check failed")

        m_prime = self._k_pke_decrypt(dk_pke, c)
        k_prime, r_prime = _g(m_prime + h)
        k_bar = _j(bytes(z) + bytes(c))
        c_prime = self._k_pke_encrypt(ek_pke, m_prime, r_prime)
        return select_bytes(k_bar, k_prime, bytes(c) == c_prime)

    def _k_pke_keygen(self, d: bytes) -> tuple[bytes, bytes]:
        rho, sigma = _g(bytes(d) + bytes((self.k,)))
        a_hat = self._generate_matrix_from_seed(rho, transpose=False)
        s, n = self._generate_error_vector(sigma, self.eta_1, 0)
        e, _ = self._generate_error_vector(sigma, self.eta_1, n)
        s_hat = s.to_ntt()
        e_hat = e.to_ntt()
        t_hat = a_hat.mat_mul(s_hat) + e_hat
        ek_pke = t_hat.encode(12) + rho
        dk_pke = s_hat.encode(12)
        return ek_pke, dk_pke

    def _k_pke_encrypt(self, ek_pke: bytes, m: bytes, r: bytes) -> bytes:
        if len(ek_pke) != self.ek_size:
            raise MLKemError("Type check failed, ek_pke has the wrong length")
        t_hat_bytes = bytes(ek_pke[:-32])
        rho = bytes(ek_pke[-32:])
        t_hat = Module.decode_vector(t_hat_bytes, self.k, 12, True)
        if t_hat.encode(12) != t_hat_bytes:
            raise MLKemError("Modulus check failed, t_hat does not encode correctly")

        a_hat_t = self._generate_matrix_from_seed(rho, transpose=True)
        y, n = self._generate_error_vector(r, self.eta_1, 0)
        e_1, n = self._generate_error_vector(r, self.eta_2, n)
        e_2, _ = self._generate_polynomial(r, self.eta_2, n)

        y_hat = y.to_ntt()
        u = a_hat_t.mat_mul(y_hat).from_ntt() + e_1
        mu = Ring.decode(m, 1, False).decompress(1)
        v = t_hat.dot(y_hat).from_ntt() + (e_2 + mu)

        c_1 = u.compress(self.du).encode(self.du)
        c_2 = v.compress(self.dv).encode(self.dv)
        return c_1 + c_2

    def _k_pke_decrypt(self, dk_pke: bytes, c: bytes) -> bytes:
        n = self.k * self.du * 32
        c_1, c_2 = bytes(c[:n]), bytes(c[n:])
        u = Module.decode_vector(c_1, self.k, self.du, False).decompress(self.du)
        v = Ring.decode(c_2, self.dv, False).decompress(self.dv)
        s_hat = Module.decode_vector(bytes(dk_pke), self.k, 12, True)
        u_hat = u.to_ntt()
        w = v - s_hat.dot(u_hat).from_ntt()
        return w.compress(1).encode(1)

    def _generate_matrix_from_seed(self, rho: bytes, transpose: bool) -> Module:
        data = [
            [Ring.ntt_sample(_xof(rho, j, i)) for j in range(self.k)]
            for i in range(self.k)
        ]
        return Module(data, transpose)

    def _generate_error_vector(self, sigma: bytes, eta: int, n: int) -> tuple[Module, int]:
        elements = [Ring.cbd(_prf(eta, sigma, n + i), eta, False) for i in range(self.k)]
        return Module([elements], True), n + self.k

    def _generate_polynomial(self, sigma: bytes, eta: int, n: int) -> tuple[Ring, int]:
        return Ring.cbd(_prf(eta, sigma, n), eta, False), n + 1


ML_KEM_512 = MLKem(ParameterSet.ML_KEM_512)
ML_KEM_768 = MLKem(ParameterSet.ML_KEM_768)
ML_KEM_1024 = MLKem(ParameterSet.ML_KEM_1024)