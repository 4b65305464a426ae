"""Boundary adapters: database, blob storage and inference webhook."""
