"""GitHub label store."""
