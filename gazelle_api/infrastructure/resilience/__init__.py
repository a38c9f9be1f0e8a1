"""Rate limiting for outgoing API requests."""
