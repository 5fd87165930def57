"""End-to-end audit pipeline: pre-flight checks, fan-out, unification."""

from pathlib import Path
from typing import Any

from splitaudit.errors import LockVerificationError
from splitaudit.executor import ProgressCallback
from splitaudit.fanout import SubmitFn, audit_each_dep, log_progress
from splitaudit.lock_verify import check_lock
from splitaudit.manifest import merged_requires, read_project
from splitaudit.models import UnifiedReport
from splitaudit.request import generate_request
from splitaudit.submit import RegistryAuditClient
from splitaudit.unify import unify_reports
from splitaudit.utils.logging import logger


def prepare_request(root: str | Path = ".") -> dict[str, Any]:
    """
    Run every pre-flight step and return the full audit request.

    Raises:
        NoManifestError, NoLockfileError, JsonParseError: project files unusable
        LockVerificationError: lockfile out of sync with package.json
    """
    project = read_project(root)
    result = check_lock(project.package_json, project.lockfile)
    if not result.status:
        raise LockVerificationError(
            f"Errors were found in your {project.lockfile_name}, run  npm install  to fix them.\n    "
            + "\n    ".join(result.errors),
            errors=result.errors,
        )
    return generate_request(project.lockfile, merged_requires(project.package_json))


async def run_audit(
    root: str | Path,
    config: dict[str, Any],
    submit: SubmitFn | None = None,
    on_progress: ProgressCallback | None = log_progress,
) -> UnifiedReport:
    """
    Audit the project at ``root`` one top-level dependency at a time.

    Args:
        root: Project directory holding package.json and a lockfile
        config: Runtime config as returned by load_runtime_config()
        submit: Override for the registry submission (defaults to RegistryAuditClient)
        on_progress: Progress observer passed through to the executor

    Returns:
        UnifiedReport covering every top-level dependency
    """
    request = prepare_request(root)
    audit_cfg = config["audit"]
    logger.debug(f"Audit request prepared with {len(request.get('requires') or {})} top-level deps")

    if submit is not None:
        results = await audit_each_dep(
            request,
            submit,
            concurrency=audit_cfg["concurrency"],
            retries=audit_cfg["retries"],
            retry_delay=audit_cfg["retry_delay"],
            on_progress=on_progress,
        )
    else:
        registry_cfg = config["registry"]
        async with RegistryAuditClient(registry_cfg["url"], timeout=registry_cfg["timeout"]) as client:
            results = await audit_each_dep(
                request,
                client.submit,
                concurrency=audit_cfg["concurrency"],
                retries=audit_cfg["retries"],
                retry_delay=audit_cfg["retry_delay"],
                on_progress=on_progress,
            )

    report = unify_reports(results)
    if report.errors:
        logger.warning(f"{len(report.errors)} dependencies could not be audited")
    return report
