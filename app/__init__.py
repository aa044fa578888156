"""
HTTP API for batch ledger parsing.
"""
