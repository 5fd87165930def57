"""splitaudit - per-dependency npm audit fan-out and report unifier."""

__version__ = "0.3.0"
