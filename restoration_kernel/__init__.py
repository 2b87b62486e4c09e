"""
Restoration Kernel

A crowdfunding ledger for restoration projects:
- Sequential project ids
- Cumulative per-funder contribution tracking
- Aggregate share minting per project
- Tagged results at the store boundary (no exceptions across it)
- In-memory and SQLAlchemy-backed stores behind one contract
"""

__version__ = "0.1.0"
