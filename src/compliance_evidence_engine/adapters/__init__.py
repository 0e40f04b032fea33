"""Adapters implementing the core repository protocols."""
