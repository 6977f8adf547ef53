"""SQLite persistence for the simulated host (SQLAlchemy Core)."""
