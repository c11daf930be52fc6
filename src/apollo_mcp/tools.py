"""Core logic for apollo-mcp's 4 tools.

Transport-agnostic: each tool receives an ApolloClient and validated arguments,
issues exactly one upstream call and reshapes the reply. ToolGateway adds the
static tool table and name-based dispatch used by both transports.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from apollo_mcp import __version__
from apollo_mcp.errors import InvalidToolArguments, ToolNotFoundError, UpstreamUnavailable
from apollo_mcp.models import (
    MAX_LIMIT,
    BulkEnrichmentArgs,
    Company,
    CompanySearchResult,
    ContactInfo,
    ContactLookupArgs,
    Lead,
    PeopleSearchResult,
    SearchCompaniesArgs,
    SearchPeopleArgs,
)
from apollo_mcp.upstream import (
    ApolloClient,
    build_bulk_enrichment,
    build_contact_lookup,
    build_search_companies,
    build_search_people,
)

logger = logging.getLogger(__name__)

# ── Constants ──

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "apollo-mcp"

SEARCH_COMPANIES = "apollo.searchCompanies"
SEARCH_PEOPLE = "apollo.searchPeople"
GET_CONTACT_INFO = "apollo.getEmailsAndPhone"
BULK_ENRICHMENT = "apollo.enrichPersonBulk"

_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}

TOOL_DEFINITIONS: tuple[dict[str, Any], ...] = (
    {
        "name": SEARCH_COMPANIES,
        "description": "Search companies in Apollo by name keyword, optionally within a country",
        "inputSchema": {
            "type": "object",
            "properties": {
                "keyword": {**_STRING, "description": "Company name keyword"},
                "country": {**_STRING, "description": "Country to restrict the search to"},
                "limit": {
                    "type": "integer",
                    "description": "Max companies returned",
                    "default": 10,
                    "minimum": 1,
                    "maximum": MAX_LIMIT,
                },
            },
            "required": ["keyword"],
            "additionalProperties": False,
        },
        "outputSchema": CompanySearchResult.model_json_schema(),
    },
    {
        "name": SEARCH_PEOPLE,
        "description": "Search people working at a company, optionally filtered by job title",
        "inputSchema": {
            "type": "object",
            "properties": {
                "company": {**_STRING, "description": "Company name"},
                "role": {**_STRING, "description": "Job title filter"},
                "limit": {
                    "type": "integer",
                    "description": "Max people returned",
                    "default": 10,
                    "minimum": 1,
                    "maximum": MAX_LIMIT,
                },
            },
            "required": ["company"],
            "additionalProperties": False,
        },
        "outputSchema": PeopleSearchResult.model_json_schema(),
    },
    {
        "name": GET_CONTACT_INFO,
        "description": (
            "Get email and phone for one person, by Apollo person ID "
            "or by person_name + company_name"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {**_STRING, "description": "Apollo person ID"},
                "person_name": {**_STRING, "description": "Full name of the person"},
                "company_name": {**_STRING, "description": "Name of the person's employer"},
            },
            "anyOf": [
                {"required": ["id"]},
                {"required": ["person_name", "company_name"]},
            ],
            "additionalProperties": False,
        },
        "outputSchema": ContactInfo.model_json_schema(),
    },
    {
        "name": BULK_ENRICHMENT,
        "description": "Bulk person enrichment by Apollo person IDs and/or email addresses",
        "inputSchema": {
            "type": "object",
            "properties": {
                "personIds": {**_STRING_LIST, "description": "Apollo person IDs"},
                "emails": {**_STRING_LIST, "description": "Email addresses"},
            },
            "required": [],
            "additionalProperties": False,
        },
    },
)


# ── Reshaping helpers ──


def _text(value: Any) -> str | None:
    """Non-empty string or None."""
    if isinstance(value, str) and value:
        return value
    return None


def _count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _records(payload: Any, key: str) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        raise UpstreamUnavailable("Apollo API returned an unexpected payload")
    items = payload.get(key) or []
    if not isinstance(items, list):
        raise UpstreamUnavailable(f"Apollo API returned a non-list '{key}' field")
    return [item for item in items if isinstance(item, dict)]


def reshape_companies(payload: Any) -> CompanySearchResult:
    return CompanySearchResult(
        companies=[
            Company(
                name=_text(org.get("name")),
                website=_text(org.get("website_url")),
                city=_text(org.get("city")),
                country=_text(org.get("country")),
                employee_count=_count(org.get("estimated_num_employees")),
                industry=_text(org.get("industry")),
            )
            for org in _records(payload, "organizations")
        ]
    )


def reshape_people(payload: Any) -> PeopleSearchResult:
    return PeopleSearchResult(
        leads=[
            Lead(
                first_name=_text(person.get("first_name")),
                last_name=_text(person.get("last_name")),
                title=_text(person.get("title")),
                email=_text(person.get("email")),
                linkedin=_text(person.get("linkedin_url")),
            )
            for person in _records(payload, "people")
        ]
    )


def _first_phone(person: dict[str, Any]) -> str | None:
    direct = _text(person.get("phone"))
    if direct:
        return direct
    numbers = person.get("phone_numbers")
    if not isinstance(numbers, list):
        return None
    for entry in numbers:
        if isinstance(entry, dict):
            number = _text(entry.get("sanitized_number")) or _text(entry.get("raw_number"))
            if number:
                return number
    return None


def reshape_contact(payload: Any) -> ContactInfo:
    if not isinstance(payload, dict):
        raise UpstreamUnavailable("Apollo API returned an unexpected payload")
    person = payload.get("person")
    if not isinstance(person, dict):
        person = {}
    return ContactInfo(
        email=_text(person.get("email")),
        phone=_first_phone(person),
        credit_used=person.get("credit_used") is True or payload.get("credit_used") is True,
    )


# ── Tool implementations ──


async def search_companies(client: ApolloClient, args: SearchCompaniesArgs) -> dict[str, Any]:
    """Company search by keyword (+ country), page size = limit."""
    payload = await client.send(build_search_companies(args))
    return reshape_companies(payload).model_dump()


async def search_people(client: ApolloClient, args: SearchPeopleArgs) -> dict[str, Any]:
    """People search by company (+ job title)."""
    payload = await client.send(build_search_people(args))
    return reshape_people(payload).model_dump()


async def get_contact_info(client: ApolloClient, args: ContactLookupArgs) -> dict[str, Any]:
    """Email + phone for one person."""
    payload = await client.send(build_contact_lookup(args))
    return reshape_contact(payload).model_dump()


async def enrich_people_bulk(client: ApolloClient, args: BulkEnrichmentArgs) -> Any:
    """Batch lookup; the upstream payload is returned untouched."""
    return await client.send(build_bulk_enrichment(args))


_ToolFn = Callable[[ApolloClient, Any], Awaitable[Any]]

_HANDLERS: dict[str, tuple[type[BaseModel], _ToolFn]] = {
    SEARCH_COMPANIES: (SearchCompaniesArgs, search_companies),
    SEARCH_PEOPLE: (SearchPeopleArgs, search_people),
    GET_CONTACT_INFO: (ContactLookupArgs, get_contact_info),
    BULK_ENRICHMENT: (BulkEnrichmentArgs, enrich_people_bulk),
}


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def parse_arguments(name: str, arguments: Any) -> BaseModel:
    """Validate raw arguments into the tool's argument model.

    Raises ToolNotFoundError for unknown names, InvalidToolArguments otherwise.
    """
    if name not in _HANDLERS:
        raise ToolNotFoundError(name)
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidToolArguments(
            f"Invalid arguments for {name}: expected an object, got {type(arguments).__name__}"
        )
    model, _ = _HANDLERS[name]
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise InvalidToolArguments(f"Invalid arguments for {name}: {_describe(exc)}") from exc


class ToolGateway:
    """Name-based tool dispatch over one ApolloClient.

    Holds no mutable state besides the client, so one instance serves any
    number of concurrent requests.
    """

    def __init__(self, client: ApolloClient) -> None:
        self._client = client

    @property
    def client(self) -> ApolloClient:
        return self._client

    def initialize(self) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    def list_tools(self) -> dict[str, Any]:
        return {"tools": copy.deepcopy(list(TOOL_DEFINITIONS))}

    def ping(self) -> dict[str, Any]:
        return {}

    async def call_tool(self, name: str, arguments: Any = None) -> Any:
        """Validate, call upstream once, reshape. Errors are GatewayError subclasses."""
        args = parse_arguments(name, arguments)
        _, handler = _HANDLERS[name]
        logger.debug("Calling tool %s", name)
        return await handler(self._client, args)
