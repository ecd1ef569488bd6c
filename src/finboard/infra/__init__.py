"""Infrastructure helpers (database wiring)."""
