"""Dataset generation and the in-memory catalog."""
