[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mlkem"
version = "0.8.0"
description = "Module-Lattice-Based Key-Encapsulation Mechanism (ML-KEM, FIPS 203) using only the standard library"
requires-python = ">=3.10"
dependencies = []
keywords = ["cryptography", "ml-kem", "kyber", "post-quantum", "kem", "lattice", "fips-203"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["mlkem"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
