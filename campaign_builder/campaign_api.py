from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from campaign_builder.config import settings
from campaign_builder.schemas import (
    AgentRef,
    CampaignCreateRequest,
    CampaignCreateResponse,
    ClientProfile,
    Template,
    TemplateFilters,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class CampaignApiError(RuntimeError):
    def __init__(self, *, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CampaignApiClient:
    """Async client for the campaign platform's ``/api`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        bearer_token: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.bearer_token = (bearer_token or settings.CAMPAIGN_API_TOKEN or "").strip() or None
        self.timeout_seconds = float(timeout_seconds or settings.CAMPAIGN_API_TIMEOUT_SECONDS)
        self._transport = transport

    async def list_agents(self) -> list[AgentRef]:
        body = await self._request_json("GET", "/api/agents")
        return self._parse_list(AgentRef, body, context="list_agents")

    async def list_templates(self, *, filters: TemplateFilters | None = None) -> list[Template]:
        params = filters.query_params() if filters else {}
        body = await self._request_json("GET", "/api/templates", params=params)
        return self._parse_list(Template, body, context="list_templates")

    async def list_client_profiles(self) -> list[ClientProfile]:
        body = await self._request_json("GET", "/api/client-profiles")
        return self._parse_list(ClientProfile, body, context="list_client_profiles")

    async def create_campaign(self, *, payload: CampaignCreateRequest) -> str:
        body = await self._request_json("POST", "/api/campaigns", json_payload=payload.to_payload())
        try:
            response = CampaignCreateResponse.model_validate(body)
        except ValidationError as exc:
            raise CampaignApiError(message=f"Campaign creation response is missing data.id: {exc}") from exc
        return response.data.id

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_payload: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("Campaign API request %s %s params=%s", method, path, params or {})
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    params=params or None,
                    json=json_payload,
                    headers=self._headers(),
                )
        except httpx.TimeoutException as exc:
            raise CampaignApiError(
                message=f"Request to {path} timed out after {self.timeout_seconds:g}s"
            ) from exc
        except httpx.RequestError as exc:
            raise CampaignApiError(message=f"Network error while calling {path}: {exc}") from exc

        if response.status_code >= 400:
            self._raise_request_error(response, path=path)

        try:
            return response.json()
        except ValueError as exc:
            raise CampaignApiError(
                message=f"{method} {path} returned invalid JSON",
                status_code=response.status_code,
            ) from exc

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"
        return headers

    @staticmethod
    def _raise_request_error(response: httpx.Response, *, path: str) -> None:
        message = f"Request to {path} failed ({response.status_code})"
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, str) and error.strip():
                message = error.strip()
            elif isinstance(error, dict) and isinstance(error.get("message"), str):
                message = error["message"]
        raise CampaignApiError(message=message, status_code=response.status_code)

    @staticmethod
    def _parse_list(model_cls: type[ModelT], body: Any, *, context: str) -> list[ModelT]:
        # Collection endpoints wrap results as {"data": [...]}; tolerate a bare list.
        items = body.get("data") if isinstance(body, dict) else body
        if items is None:
            items = []
        if not isinstance(items, list):
            raise CampaignApiError(message=f"{context} response data must be a list")
        try:
            return [model_cls.model_validate(item) for item in items]
        except ValidationError as exc:
            raise CampaignApiError(message=f"{context} payload validation failed: {exc}") from exc
