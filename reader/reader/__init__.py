"""reader: CCIP-Read gateway client."""
