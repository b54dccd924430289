"""
tlog_core - RFC 6962 Merkle tree mathematics for transparency logs.

Subpackages:
- crypto: domain-separated leaf/node hashing
- merkle: range arithmetic, proof planning, verification, tree building
- schemas: error taxonomy and log API payload models
- config: runtime configuration
"""

__version__ = "0.1.0"
