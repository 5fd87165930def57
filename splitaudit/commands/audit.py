"""Audit an npm project one top-level dependency at a time."""

import asyncio
import json
import sys
from pathlib import Path

import click

from splitaudit.models import Severity
from splitaudit.pipeline.ui import RichCommand
from splitaudit.utils.error_handler import handle_exceptions
from splitaudit.utils.exit_codes import ExitCodes

_SEVERITY_CHOICES = [s.value for s in Severity if s is not Severity.UNKNOWN]


@click.command(cls=RichCommand)
@handle_exceptions
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Project directory")
@click.option("--concurrency", type=click.IntRange(min=1), help="Max audits in flight [default: 20]")
@click.option("--retries", type=click.IntRange(min=0), help="Retries per dependency [default: 2]")
@click.option("--retry-delay", type=click.FloatRange(min=0), help="Seconds between retries [default: 1]")
@click.option("--registry", help="Registry base URL [default: https://registry.npmjs.org]")
@click.option("--timeout", type=click.FloatRange(min=0), help="HTTP timeout in seconds [default: 30]")
@click.option("--out", type=click.Path(dir_okay=False), help="Also write the JSON report to this file")
@click.option("--summary", is_flag=True, help="Print a severity table to stderr")
@click.option(
    "--fail-on",
    type=click.Choice(_SEVERITY_CHOICES, case_sensitive=False),
    help="Exit 2 when a finding at or above this severity exists",
)
def audit(root, concurrency, retries, retry_delay, registry, timeout, out, summary, fail_on):
    """Audit dependencies for known vulnerabilities, one request per top-level dep.

    The registry's bulk audit endpoint can drop or mis-scope findings when it
    receives a whole dependency graph at once. This command submits one
    request per top-level dependency (dependencies + devDependencies),
    retries transient failures, and merges the answers into one report.

    \b
    Output (stdout, pretty-printed JSON):
      {"prod": {severity: {"pkg@version": {paths, overview}}},
       "dev":  {...},
       "errors": {dependency: message}}

    Progress goes to stderr.

    \b
    Examples:
      splitaudit audit                        # Audit the current project
      splitaudit audit --root ./app --summary
      splitaudit audit --concurrency 5 --retries 4
      splitaudit audit --fail-on high         # CI gate

    \b
    Exit Codes:
      0 = Report produced (dependencies that failed are listed under "errors")
      1 = Pre-flight failure (no package.json, no lockfile, lock mismatch)
      2 = Findings at or above --fail-on"""
    from splitaudit.config_runtime import load_runtime_config
    from splitaudit.pipeline.ui import print_summary
    from splitaudit.pipelines import run_audit

    config = load_runtime_config(root)
    overrides = {
        ("audit", "concurrency"): concurrency,
        ("audit", "retries"): retries,
        ("audit", "retry_delay"): retry_delay,
        ("registry", "url"): registry,
        ("registry", "timeout"): timeout,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            config[section][key] = value

    report = asyncio.run(run_audit(root, config))
    document = json.dumps(report.to_dict(), indent=2)
    click.echo(document)

    if out:
        out_path = Path(out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(document + "\n", encoding="utf-8")

    if summary:
        print_summary(report)

    if fail_on:
        threshold = Severity.parse(fail_on)
        worst = report.max_severity()
        if worst is not None and worst.rank >= threshold.rank:
            sys.exit(ExitCodes.SEVERITY_THRESHOLD)
