"""HTTP client for the serverless functions endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from ..exceptions import BackendError
from .backend_base import FunctionsBackend

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class HttpFunctionsClient(FunctionsBackend):
    """Invoke functions at ``{base_url}/functions/v1/{name}`` with the service key."""

    base_url: str
    service_role_key: str = ""
    timeout_seconds: float = 15.0
    health_path: str = "/api/health"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.service_role_key:
            headers["Authorization"] = f"Bearer {self.service_role_key}"
            headers["apikey"] = self.service_role_key
        return headers

    async def invoke(self, name: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/functions/v1/{name}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, headers=self._headers(), json=body)
        except httpx.HTTPError as exc:
            logger.error("functions.invoke.transport_error", function=name, error=str(exc))
            raise BackendError(f"Function '{name}' is unreachable") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(
                "functions.invoke.failed",
                function=name,
                status_code=response.status_code,
                error=message,
            )
            raise BackendError(message or f"Function '{name}' failed with status {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("functions.invoke.invalid_body", function=name, status_code=response.status_code)
            raise BackendError(f"Function '{name}' returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise BackendError(f"Function '{name}' returned an unexpected response")
        return data

    async def ping(self) -> bool:
        url = f"{self.base_url}{self.health_path}"
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.head(url)
        return response.is_success


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str):
            return error
        if isinstance(error, dict):
            return error.get("message")
    return None
