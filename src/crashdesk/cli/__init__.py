"""Command line interface for crashdesk."""
