"""Adapters – store-specific implementations."""
