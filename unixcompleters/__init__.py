"""unixcompleters - complete native utilities with their bash completion functions."""
