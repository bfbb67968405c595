"""Adapters layer - Concrete implementations of ports.

- Carrier data from CSV files
- Carrier data already held in memory (tests, embedding hosts)
"""
