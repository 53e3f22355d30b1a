"""
Theurgy - Command implementations for the Oraculum CLI.

Each module corresponds to a top-level CLI command:
- methods:   List the operations a contract exposes
- interface: Print the interface signature listing
- invoke:    Run one operation and report its outcome
- console:   Interactive prompt over every operation
"""
