"""Remote database adapters."""
