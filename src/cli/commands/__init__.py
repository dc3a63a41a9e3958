"""pbdigest CLI commands."""
