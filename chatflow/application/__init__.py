"""Application layer: use-case orchestration and client-state view models."""
