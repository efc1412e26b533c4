"""SQLAlchemy-backed repository implementations."""
