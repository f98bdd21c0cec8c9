"""Parsing, Redis and HTTP helper utilities."""
