"""
Value objects passed between the setup steps.

The registration models serialize camelCase on the wire (`firstName`,
`orgUrl`, ...) but use snake_case attributes in Python.
"""

import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class OrganizationRequest(BaseModel):
    """Registration details for a new Okta developer organization."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    first_name: str = Field(..., min_length=1, description="Account owner's first name")
    last_name: str = Field(..., min_length=1, description="Account owner's last name")
    email: str = Field(..., description="Address the activation email is sent to")
    organization: str = Field(default="", description="Company or organization name")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Reject values that are obviously not an email address."""
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError(f"'{v}' is not a valid email address")
        return v


class OrganizationResponse(BaseModel):
    """Result of a successful organization registration."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    org_url: str = Field(..., min_length=1)
    api_token: str = Field(..., min_length=1, repr=False)


@dataclass(frozen=True)
class ClientConfiguration:
    """
    Okta client configuration discovered on this machine.

    An empty `base_url` means no org has been configured yet.
    """

    base_url: str = ""
    api_token: str = ""
    source: str = ""

    def __repr__(self) -> str:
        # Never render the token.
        return f"ClientConfiguration(base_url={self.base_url!r}, source={self.source!r})"
