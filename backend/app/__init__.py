"""Application layer: exchange client, services, and CLI."""
