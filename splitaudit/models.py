"""Data contracts for per-dependency audit results and the unified report."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class Severity(Enum):
    """Advisory severity as reported by the registry.

    Values the registry may add later fall back to UNKNOWN instead of being
    dropped from the report.
    """
    INFO = "info"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Map a raw severity string onto the enum, UNKNOWN if unrecognised."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN

    @property
    def rank(self) -> int:
        """Ordering used for threshold checks (higher is worse)."""
        return SEVERITY_RANK[self]


SEVERITY_RANK = {
    Severity.UNKNOWN: 0,
    Severity.INFO: 1,
    Severity.LOW: 2,
    Severity.MODERATE: 3,
    Severity.HIGH: 4,
    Severity.CRITICAL: 5,
}


@dataclass
class Success:
    """A dependency whose audit submission returned a report."""
    report: dict[str, Any]


@dataclass
class Failure:
    """A dependency whose audit submission exhausted its retries."""
    message: str


DepResult = Union[Success, Failure]


@dataclass
class PackageFinding:
    """Readable dependency paths leading to one vulnerable package@version."""
    paths: list[str] = field(default_factory=list)
    overview: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"paths": list(self.paths), "overview": self.overview}


# {severity: {"pkg@version": PackageFinding}}
SeverityBuckets = dict[Severity, dict[str, PackageFinding]]


@dataclass
class UnifiedReport:
    """Merged view of every per-dependency audit in one run."""
    prod: SeverityBuckets = field(default_factory=dict)
    dev: SeverityBuckets = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    def bucket(self, dev: bool) -> SeverityBuckets:
        """Return the sub-report for the given environment."""
        return self.dev if dev else self.prod

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON document printed at the end of a run."""
        return {
            "prod": _buckets_to_dict(self.prod),
            "dev": _buckets_to_dict(self.dev),
            "errors": dict(self.errors),
        }

    def counts(self) -> dict[str, dict[Severity, int]]:
        """Number of distinct vulnerable packages per environment and severity."""
        return {
            "prod": {sev: len(pkgs) for sev, pkgs in self.prod.items()},
            "dev": {sev: len(pkgs) for sev, pkgs in self.dev.items()},
        }

    def max_severity(self) -> Severity | None:
        """Worst severity present in either environment, None when clean."""
        present = [sev for buckets in (self.prod, self.dev) for sev, pkgs in buckets.items() if pkgs]
        if not present:
            return None
        return max(present, key=lambda sev: sev.rank)


def _buckets_to_dict(buckets: SeverityBuckets) -> dict[str, dict[str, Any]]:
    return {
        severity.value: {name: finding.to_dict() for name, finding in packages.items()}
        for severity, packages in buckets.items()
    }
