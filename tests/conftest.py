"""Shared pytest configuration."""

pytest_plugins = ["docmigrate.testing.fixtures"]
