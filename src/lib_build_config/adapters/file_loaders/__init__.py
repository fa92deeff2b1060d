"""Structured settings file adapters (TOML, JSON, YAML)."""
