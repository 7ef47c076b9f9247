"""ML-KEM key encapsulation (FIPS 203) with its polynomial ring and module arithmetic."""

__version__ = "0.8.0"
__all__ = ["kem", "module", "ring"]