"""Exception types raised by splitaudit.

Pre-flight errors abort a run before any audit is submitted. SubmissionError
is the transient failure surface that the executor retries.
"""

from pathlib import Path


class AuditError(Exception):
    """Base class for all splitaudit errors. ``code`` is stable across releases."""

    code = "EAUDIT"


class NoManifestError(AuditError):
    """Raised when the project root has no package.json."""

    code = "EAUDITNOPJSON"


class NoLockfileError(AuditError):
    """Raised when neither npm-shrinkwrap.json nor package-lock.json exists."""

    code = "EAUDITNOLOCK"


class JsonParseError(AuditError):
    """Raised when a manifest or lockfile is not valid JSON."""

    code = "EJSONPARSE"

    def __init__(self, message: str, file: Path):
        super().__init__(message)
        self.file = file


class LockVerificationError(AuditError):
    """Raised when the lockfile disagrees with package.json."""

    code = "ELOCKVERIFY"

    def __init__(self, message: str, errors: list[str]):
        super().__init__(message)
        self.errors = errors


class SubmissionError(AuditError):
    """Raised when the registry rejects or garbles an audit submission."""

    code = "EAUDITSUBMIT"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
