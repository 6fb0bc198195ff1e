"""Command line interface for blueprint export and import."""
