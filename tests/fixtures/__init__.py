"""
Test fixtures for tlog-merkle.

- log_fixtures: leaf input factories and log API JSON builders
- reference: independent recursive RFC 6962 MTH / PATH / PROOF
"""
