"""Feed services."""
