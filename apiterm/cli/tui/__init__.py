"""Curses TUI for apiterm."""
