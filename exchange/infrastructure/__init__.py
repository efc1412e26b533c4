"""Adapters for the database, cache and external price source."""
