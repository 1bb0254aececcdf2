"""Command-line interface for qmims."""
