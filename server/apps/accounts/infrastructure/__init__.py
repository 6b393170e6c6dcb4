"""Infrastructure layer for accounts app (credential store)."""
