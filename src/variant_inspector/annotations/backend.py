"""HTTP client for the analysis backend's HGVS alternatives endpoints."""

import logging
import os
from typing import Any, Protocol

import httpx

from ..errors import LookupFailure, PersistenceError

logger = logging.getLogger(__name__)

API_TOKEN_ENV_VAR = "VARIANT_INSPECTOR_API_TOKEN"
DEFAULT_BACKEND_URL = "http://localhost:8000"


class AnnotationLookupService(Protocol):
    """What the annotation cache needs from the annotation backend."""

    async def lookup(self, transcript: str, position: int, ref: str, alt: str) -> list[str]: ...

    async def persist_alternatives(
        self, job_id: str, primary_hgvs: str, alternatives: list[str]
    ) -> None: ...


def _string_list(payload: Any, what: str) -> list[str]:
    if not isinstance(payload, list) or not all(isinstance(x, str) for x in payload):
        raise LookupFailure(f"Malformed {what}: expected a list of strings")
    return payload


class BackendClient:
    """Async client for HGVS alternative lookups and their persistence.

    Usage:
        async with BackendClient("http://localhost:8000") as client:
            names = await client.lookup("NM_000546.6", 7675088, "C", "T")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: float = 30.0,
        api_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_token = api_token if api_token is not None else os.environ.get(API_TOKEN_ENV_VAR)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def __aenter__(self) -> "BackendClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("BackendClient is not open; use 'async with BackendClient(...)'")
        return self._client

    async def lookup(self, transcript: str, position: int, ref: str, alt: str) -> list[str]:
        """Fetch equivalent HGVS names for a variant on a transcript.

        Raises:
            LookupFailure: On transport errors, HTTP errors or a malformed body.
        """
        params = {"transcript": transcript, "position": position, "ref": ref, "alt": alt}
        logger.debug("Requesting HGVS alternatives for %s %s%d%s", transcript, ref, position, alt)
        try:
            response = await self.client.get("/hgvs/alternatives", params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise LookupFailure(f"HGVS alternatives lookup failed: {e}") from e
        except ValueError as e:
            raise LookupFailure(f"HGVS alternatives response is not JSON: {e}") from e

        return _string_list(payload, "HGVS alternatives response")

    async def persist_alternatives(
        self, job_id: str, primary_hgvs: str, alternatives: list[str]
    ) -> None:
        """Save alternatives on the job, keyed by the primary HGVS name.

        Raises:
            PersistenceError: If the backend rejects or cannot receive the save.
        """
        body = {"hgvs": primary_hgvs, "alternatives": alternatives}
        try:
            response = await self.client.post(f"/jobs/{job_id}/hgvs-alternatives", json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise PersistenceError(f"Could not save alternatives for job {job_id}: {e}") from e

    async def fetch_job_alternatives(self, job_id: str) -> dict[str, list[str]]:
        """Load previously persisted alternatives for a job.

        Raises:
            LookupFailure: On transport errors or a malformed body.
        """
        try:
            response = await self.client.get(f"/jobs/{job_id}/hgvs-alternatives")
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise LookupFailure(f"Could not load alternatives for job {job_id}: {e}") from e
        except ValueError as e:
            raise LookupFailure(f"Job alternatives response is not JSON: {e}") from e

        if not isinstance(payload, dict):
            raise LookupFailure("Malformed job alternatives: expected an object")
        return {
            str(key): _string_list(value, f"alternatives for {key}")
            for key, value in payload.items()
        }
