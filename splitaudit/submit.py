"""Async client for the npm registry bulk audit endpoint."""

from typing import Any

import httpx

from splitaudit import __version__
from splitaudit.errors import SubmissionError
from splitaudit.utils.constants import AUDIT_ENDPOINT, DEFAULT_REGISTRY
from splitaudit.utils.logging import logger


class RegistryAuditClient:
    """
    Posts audit requests to ``<registry>/-/npm/v1/security/audits``.

    Every failure mode (transport error, non-2xx status, unparseable body)
    surfaces as SubmissionError so the executor can retry it.

    Usage:
        async with RegistryAuditClient("https://registry.npmjs.org") as client:
            report = await client.submit(request)
    """

    def __init__(
        self,
        registry: str = DEFAULT_REGISTRY,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.registry = registry.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return f"{self.registry}{AUDIT_ENDPOINT}"

    async def __aenter__(self) -> "RegistryAuditClient":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
            headers={
                "User-Agent": f"splitaudit/{__version__}",
                "Accept": "application/json",
            },
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def submit(self, request: dict[str, Any]) -> dict[str, Any]:
        """Submit one audit request and return the full registry report."""
        if self._client is None:
            raise RuntimeError("RegistryAuditClient used outside 'async with'")

        try:
            resp = await self._client.post(self.url, json=request)
        except httpx.HTTPError as e:
            raise SubmissionError(f"{type(e).__name__}: {e}") from e

        if resp.status_code < 200 or resp.status_code >= 300:
            raise SubmissionError(
                f"Registry returned HTTP {resp.status_code} for {self.url}",
                status_code=resp.status_code,
            )

        try:
            report = resp.json()
        except ValueError as e:
            raise SubmissionError(f"Invalid JSON in audit response: {e}") from e

        if not isinstance(report, dict):
            raise SubmissionError("Audit response was not a JSON object")

        logger.debug(
            f"Audit response: {len(report.get('advisories') or {})} advisories, "
            f"{len(report.get('actions') or [])} actions"
        )
        return report
