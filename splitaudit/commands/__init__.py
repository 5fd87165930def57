"""CLI commands for splitaudit."""
