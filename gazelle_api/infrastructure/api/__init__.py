"""HTTP client, request executor and response classification."""
