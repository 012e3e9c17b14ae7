"""HTTP API for the salary ledger."""
