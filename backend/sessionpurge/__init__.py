"""Session purge backend."""
