"""HTTP interface for the pool."""
