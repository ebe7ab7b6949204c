"""Error catalog and exception types."""
