"""Console output infrastructure."""
from .ui import console, print_status_panel, print_summary

__all__ = ["console", "print_status_panel", "print_summary"]
