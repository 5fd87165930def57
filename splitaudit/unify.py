"""Reduce per-dependency audit results into one unified report."""

from collections.abc import Mapping
from typing import Any

from splitaudit.models import DepResult, Failure, PackageFinding, Severity, UnifiedReport


def unify_reports(results: Mapping[str, DepResult]) -> UnifiedReport:
    """
    Merge per-dependency registry reports into prod/dev severity buckets.

    A dependency that failed lands in ``errors``. A report with no actions
    contributes nothing even when it lists advisories. Findings that map to
    the same ``pkg@version`` accumulate their paths; the overview is taken
    from whichever advisory was seen last.

    Never raises: missing or null fields are treated as empty.
    """
    final = UnifiedReport()

    for dep, result in results.items():
        if isinstance(result, Failure):
            final.errors[dep] = result.message
            continue

        report = getattr(result, "report", None)
        if not isinstance(report, Mapping) or not report.get("actions"):
            continue

        for advisory in _as_values(report.get("advisories")):
            if not isinstance(advisory, Mapping):
                continue
            severity = Severity.parse(advisory.get("severity"))
            module_name = advisory.get("module_name") or ""
            overview = advisory.get("overview") or ""

            for finding in _as_list(advisory.get("findings")):
                if not isinstance(finding, Mapping):
                    continue
                container = final.bucket(bool(finding.get("dev"))).setdefault(severity, {})
                key = f"{module_name}@{finding.get('version') or ''}"
                entry = container.setdefault(key, PackageFinding())
                entry.paths.extend(readable_path(path) for path in _as_list(finding.get("paths")))
                entry.overview = overview

    return final


def readable_path(path: str) -> str:
    """Turn ``a>b>c`` into ``a > b > c``."""
    return " > ".join(str(path).split(">"))


def _as_values(advisories: Any) -> list[Any]:
    if isinstance(advisories, Mapping):
        return list(advisories.values())
    return _as_list(advisories)


def _as_list(value: Any) -> list[Any]:
    # Strings are not lists of paths: "a>b" must not split into characters
    return value if isinstance(value, list) else []
