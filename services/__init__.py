"""
Service layer for business logic.

This package contains the service that runs batch files through
line reading, parsing and JSON export.
"""
