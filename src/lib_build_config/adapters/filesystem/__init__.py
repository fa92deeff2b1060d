"""Filesystem writer adapter."""
