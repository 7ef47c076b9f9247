# mlkem

ML-KEM, the Module-Lattice-Based Key-Encapsulation Mechanism standardised
in FIPS 203, written with nothing but the Python standard library
(`hashlib` for SHA3-256, SHA3-512, SHAKE128 and SHAKE256, and `secrets`
for randomness).

All three parameter sets are supported: ML-KEM-512, ML-KEM-768 and
ML-KEM-1024.

## Usage

```python
from mlkem.kem import MLKem, ParameterSet

kem = MLKem(ParameterSet.ML_KEM_768)

# Receiver generates a key pair.
ek, dk = kem.keygen()

# Sender derives a shared key and a ciphertext from the encapsulation key.
shared_key, ciphertext = kem.encaps(ek)

# Receiver recovers the same shared key from the ciphertext.
assert kem.decaps(dk, ciphertext) == shared_key
```

Ready-made instances are available as `mlkem.kem.ML_KEM_512`,
`mlkem.kem.ML_KEM_768` and `mlkem.kem.ML_KEM_1024`.

Keys, ciphertexts and shared keys are plain `bytes`. Each `MLKem`
instance reports the expected lengths through its `ek_size`, `dk_size`
and `ciphertext_size` properties; the shared key is always 32 bytes.

### Deterministic variants

`keygen`, `encaps` and `decaps` draw their seeds from `secrets.token_bytes`.
For known-answer testing, the deterministic variants take the seeds
explicitly:

- `keygen_internal(d, z)` – key generation from two 32-byte seeds;
- `encaps_internal(ek, m)` – encapsulation of a 32-byte message `m`;
- `decaps_internal(dk, c)` – decapsulation (what `decaps` calls).

### Errors

`MLKemError` (a subclass of `ValueError`) is raised when:

- the ciphertext or decapsulation key passed to `decaps` has the wrong
  length;
- the hash of the encapsulation key stored inside a decapsulation key
  does not match the hash stored next to it;
- an encapsulation key has the wrong length, or its coefficients do not
  re-encode to the same bytes (the modulus check);
- the message given to `encaps_internal` is not 32 bytes.

A ciphertext of the right length that was tampered with does not raise:
decapsulation uses implicit rejection and returns a pseudorandom key
derived from the secret value `z` and the ciphertext. The final choice
between the two keys is made by `select_bytes(a, b, cond)`, which returns
`b` when `cond` is true and `a` otherwise by masking each byte.

## Building blocks

- `mlkem.ring.Ring` – a polynomial in Z_3329[X]/(X^256 + 1), held either
  in normal form or in the NTT domain. It offers `+`, `-` and `*`
  (schoolbook multiplication in normal form, pointwise base multiplication
  in the NTT domain; mixing the two raises `ValueError`), `to_ntt` /
  `from_ntt`, `encode` / `decode` of d-bit coefficients, `compress` /
  `decompress`, rejection sampling with `ntt_sample`, centered binomial
  sampling with `cbd`, and the constructors `zero`, `one`, `x` and
  `random`. `random` uses the `random` module and is meant for testing
  only.
- `mlkem.module.Module` – a matrix of `Ring` elements with a transpose
  flag. It offers `mat_mul`, `dot`, `+`, indexing with `m[i, j]`, `dim`,
  `to_ntt` / `from_ntt`, `encode`, `decode_vector`, `compress` /
  `decompress` and `random`. Mismatched dimensions raise `ValueError`.

## What this package does not do

- It has no command-line interface; it is used as a library.
- It does not read or write key files or any serialisation format other
  than the raw byte strings defined by FIPS 203.
- It is written for clarity rather than speed and makes no attempt at
  constant-time execution. Do not use it where timing or other side
  channels matter.