"""
authpath - incremental Merkle authentication paths

Append-only binary Merkle tree that keeps a set of authentication paths
valid as leaves arrive, and replays the same path algorithm over
circuit-bound variables for membership statements.

Packages:
    authpath.crypto   digest capability (SHA-256 / SHA-512 mixers)
    authpath.merkle   paths, tree, bundle, persistence codec
    authpath.circuit  symbolic realization and membership circuit
    authpath.schemas  errors, canonical JSON, report models
    authpath.config   runtime configuration
"""

__version__ = "0.1.0"
