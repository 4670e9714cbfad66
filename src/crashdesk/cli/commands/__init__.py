"""Command groups registered on the crashdesk CLI."""
