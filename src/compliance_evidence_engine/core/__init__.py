"""Core domain: submission records, repository protocols, and services."""
