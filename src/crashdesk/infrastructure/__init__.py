"""Cross-cutting infrastructure: logging and errors."""
