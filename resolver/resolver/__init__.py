"""resolver: example CCIP-Read gateway backed by SQLite records."""
