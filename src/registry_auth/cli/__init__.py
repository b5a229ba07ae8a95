"""Command-line interface for registry-auth."""
