"""Tool argument and output models.

One argument model per tool: validated at the boundary, unknown keys rejected.
Output models declare every field; values missing upstream stay ``None``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_LIMIT = 100


class _ToolArgs(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, strict=True)


# ── Arguments ──


class SearchCompaniesArgs(_ToolArgs):
    """Arguments for apollo.searchCompanies."""

    keyword: str = Field(..., min_length=1, description="Company name keyword")
    country: Optional[str] = Field(None, description="Country to restrict the search to")
    limit: int = Field(10, ge=1, le=MAX_LIMIT, description="Max companies returned")


class SearchPeopleArgs(_ToolArgs):
    """Arguments for apollo.searchPeople."""

    company: str = Field(..., min_length=1, description="Company name")
    role: Optional[str] = Field(None, description="Job title filter")
    limit: int = Field(10, ge=1, le=MAX_LIMIT, description="Max people returned")


class ContactLookupArgs(_ToolArgs):
    """Arguments for apollo.getEmailsAndPhone.

    Either an Apollo person ``id`` or a ``person_name`` + ``company_name`` pair.
    """

    id: Optional[str] = Field(None, min_length=1, description="Apollo person ID")
    person_name: Optional[str] = Field(None, min_length=1, description="Full name")
    company_name: Optional[str] = Field(None, min_length=1, description="Employer name")

    @model_validator(mode="after")
    def _one_identifier(self) -> ContactLookupArgs:
        if self.id:
            return self
        if self.person_name and self.company_name:
            return self
        raise ValueError("Provide id, or both person_name and company_name")


class BulkEnrichmentArgs(_ToolArgs):
    """Arguments for apollo.enrichPersonBulk."""

    personIds: list[str] = Field(default_factory=list, description="Apollo person IDs")
    emails: list[str] = Field(default_factory=list, description="Email addresses")

    @model_validator(mode="after")
    def _not_empty(self) -> BulkEnrichmentArgs:
        if not self.personIds and not self.emails:
            raise ValueError("Provide personIds or emails")
        return self


# ── Outputs ──


class Company(BaseModel):
    name: Optional[str] = None
    website: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    employee_count: Optional[int] = None
    industry: Optional[str] = None


class CompanySearchResult(BaseModel):
    companies: list[Company]


class Lead(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    title: Optional[str] = None
    email: Optional[str] = None
    linkedin: Optional[str] = None


class PeopleSearchResult(BaseModel):
    leads: list[Lead]


class ContactInfo(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    credit_used: bool = False
