"""
Core processing modules for batch ledger files.

This package contains:
- config: Application configuration and settings
- exceptions: Custom exception classes
- exporters: JSON export functionality
- ledger: Per-account balance ledger
- logger: Logging configuration
- parsing: Batch file state machine
- schema: Pydantic models for headers, transactions and results
- validators: Line prefix and digit validation
"""
