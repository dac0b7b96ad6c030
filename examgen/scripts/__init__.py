"""Maintenance scripts, run with `python -m examgen.scripts.<name>`."""
