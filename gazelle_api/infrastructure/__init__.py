"""Infrastructure layer: HTTP client, rate limiting, config, logging and CLI display."""
