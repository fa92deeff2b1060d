"""Environment variable settings adapter."""
