"""HTTP API for the AI router."""
