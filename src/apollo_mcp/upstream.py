"""Apollo API client.

Request builders are pure functions: each one turns validated tool arguments
into an UpstreamRequest field by field. User values only ever travel as JSON
values or URL-quoted path segments, never spliced into query text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from apollo_mcp.config import ApolloMcpConfig
from apollo_mcp.errors import UpstreamError, UpstreamUnavailable
from apollo_mcp.models import (
    BulkEnrichmentArgs,
    ContactLookupArgs,
    SearchCompaniesArgs,
    SearchPeopleArgs,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpstreamRequest:
    """A fully described outbound call, before credentials are attached."""

    method: str
    path: str
    json: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)


# ── Request builders ──


def build_search_companies(args: SearchCompaniesArgs) -> UpstreamRequest:
    body: dict[str, Any] = {
        "q_organization_name": args.keyword,
        "page": 1,
        "per_page": args.limit,
    }
    if args.country:
        body["organization_locations"] = [args.country]
    return UpstreamRequest("POST", "/organizations/search", json=body)


def build_search_people(args: SearchPeopleArgs) -> UpstreamRequest:
    body: dict[str, Any] = {
        "q_organization_name": args.company,
        "page": 1,
        "per_page": args.limit,
    }
    if args.role:
        body["person_titles"] = [args.role]
    return UpstreamRequest("POST", "/mixed_people/search", json=body)


def build_contact_lookup(args: ContactLookupArgs) -> UpstreamRequest:
    """Point lookup: by id when given, otherwise a name + company match."""
    if args.id:
        return UpstreamRequest("GET", f"/people/{quote(args.id, safe='')}")
    return UpstreamRequest(
        "POST",
        "/people/match",
        json={"name": args.person_name, "organization_name": args.company_name},
    )


def build_bulk_enrichment(args: BulkEnrichmentArgs) -> UpstreamRequest:
    body: dict[str, Any] = {}
    if args.personIds:
        body["person_ids"] = list(args.personIds)
    if args.emails:
        body["emails"] = list(args.emails)
    return UpstreamRequest("POST", "/bulk_people_enrichment", json=body)


# ── HTTP client ──


class ApolloClient:
    """Sends UpstreamRequests to Apollo with the configured credential.

    Pass ``transport`` to swap the network layer (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        config: ApolloMcpConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Cache-Control": "no-cache",
                "X-Api-Key": config.api_key,
            },
        )

    async def send(self, request: UpstreamRequest) -> Any:
        """Issue one call and return the decoded JSON body.

        Raises UpstreamError on non-2xx, UpstreamUnavailable on transport
        failure or a body that is not JSON. Never retries.
        """
        try:
            response = await self._client.request(
                request.method,
                request.path,
                json=request.json,
                headers=request.headers or None,
            )
        except httpx.HTTPError as exc:
            logger.warning("Apollo call %s %s failed: %s", request.method, request.path, exc)
            raise UpstreamUnavailable(f"Apollo API unreachable: {type(exc).__name__}") from exc

        if not response.is_success:
            logger.warning(
                "Apollo call %s %s returned %d", request.method, request.path, response.status_code
            )
            raise UpstreamError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Apollo call %s %s returned non-JSON body", request.method, request.path)
            raise UpstreamUnavailable("Apollo API returned a non-JSON body") from exc

    async def close(self) -> None:
        await self._client.aclose()
