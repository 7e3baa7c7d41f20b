"""Adapters – concrete journal store backends."""
