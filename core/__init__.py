"""Configuration, error types and result containers."""
