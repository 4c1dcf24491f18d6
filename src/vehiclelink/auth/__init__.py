"""Connect URL building, token exchange, and webhook verification."""
