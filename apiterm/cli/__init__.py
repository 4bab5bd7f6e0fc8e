"""apiterm command line and terminal UI."""
