"""
Profile schemas, one per supported provider.

The active schema is picked from ProviderConfig.kind when the fetcher is built;
each variant carries a "provider" tag so a UserProfile can be told apart after
serialization.
"""

from typing import Annotated, Dict, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from .config import ProviderKind


class GoogleProfile(BaseModel):
    """https://www.googleapis.com/oauth2/v2/userinfo"""

    model_config = ConfigDict(extra="ignore")

    provider: Literal["google"] = "google"
    id: Optional[str] = None
    email: Optional[str] = None
    verified_email: Optional[bool] = None
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None
    locale: Optional[str] = None
    hd: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or ""


class MicrosoftProfile(BaseModel):
    """Microsoft Graph user resource (GET /v1.0/me)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    provider: Literal["microsoft"] = "microsoft"
    id: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    given_name: Optional[str] = Field(default=None, alias="givenName")
    surname: Optional[str] = None
    job_title: Optional[str] = Field(default=None, alias="jobTitle")
    mail: Optional[str] = None
    mobile_phone: Optional[str] = Field(default=None, alias="mobilePhone")
    office_location: Optional[str] = Field(default=None, alias="officeLocation")
    preferred_language: Optional[str] = Field(default=None, alias="preferredLanguage")
    user_principal_name: Optional[str] = Field(default=None, alias="userPrincipalName")


class OidcProfile(BaseModel):
    """Standard claims from an OpenID Connect userinfo endpoint."""

    model_config = ConfigDict(extra="ignore")

    provider: Literal["oidc"] = "oidc"
    sub: str
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    preferred_username: Optional[str] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None
    picture: Optional[str] = None
    locale: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.preferred_username or self.email or self.sub


UserProfile = Annotated[
    Union[GoogleProfile, MicrosoftProfile, OidcProfile],
    Field(discriminator="provider"),
]

PROFILE_SCHEMAS: Dict[ProviderKind, Type[BaseModel]] = {
    ProviderKind.GOOGLE: GoogleProfile,
    ProviderKind.MICROSOFT: MicrosoftProfile,
    ProviderKind.OIDC: OidcProfile,
}


def profile_schema_for(kind: ProviderKind) -> Type[BaseModel]:
    return PROFILE_SCHEMAS[kind]
