"""Centralized exit codes for the splitaudit CLI."""


class ExitCodes:
    """Standard exit codes for splitaudit commands."""

    SUCCESS = 0

    # Raised through click.ClickException for pre-flight failures
    PREFLIGHT_FAILED = 1

    # Only with --fail-on: a finding at or above the threshold exists
    SEVERITY_THRESHOLD = 2

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - unified report produced",
            cls.PREFLIGHT_FAILED: "Audit could not start (manifest, lockfile or lock verification)",
            cls.SEVERITY_THRESHOLD: "Findings at or above the --fail-on severity detected",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
