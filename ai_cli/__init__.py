"""Command-line client for the 1min.ai API."""
