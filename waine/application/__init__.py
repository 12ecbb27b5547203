"""Application layer: request orchestration services."""
