"""data models for profiles and their cached credentials."""
import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .errors import ValidationError

PROFILE_NAME_PATTERN = r"^[0-9a-zA-Z-]{1,64}$"
ACCOUNT_ID_PATTERN = r"^[0-9]{12}$"
ROLE_NAME_PATTERN = r"^[0-9A-Za-z_+=,.@-]{1,64}$"
REGION_PATTERN = r"^[a-z]{2}(-gov|-iso[a-z]*)?-[a-z]+-[0-9]+$"


class Credentials(BaseModel):
    """temporary access key / secret key / session token with an expiration."""
    model_config = ConfigDict(frozen=True)

    access_key_id: str = Field(
        serialization_alias="accessKeyId",
        validation_alias=AliasChoices("accessKeyId", "AccessKeyId", "access_key_id"),
    )
    secret_access_key: str = Field(
        serialization_alias="secretAccessKey",
        validation_alias=AliasChoices("secretAccessKey", "SecretAccessKey", "secret_access_key"),
    )
    session_token: str = Field(
        serialization_alias="sessionToken",
        validation_alias=AliasChoices("sessionToken", "SessionToken", "session_token"),
    )
    expiration: datetime = Field(
        serialization_alias="expiration",
        validation_alias=AliasChoices("expiration", "Expiration"),
    )

    @field_validator("expiration")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_zero(self) -> bool:
        # zero value written for never-fetched credentials: 0001-01-01T00:00:00Z
        return self.expiration.year <= 1


class Profile(BaseModel):
    """parameters used to assume a role, plus the last credentials issued for it."""
    account_id: str = Field(
        pattern=ACCOUNT_ID_PATTERN,
        serialization_alias="accountId",
        validation_alias=AliasChoices("accountId", "account_id"),
    )
    role_to_assume: str = Field(
        pattern=ROLE_NAME_PATTERN,
        serialization_alias="roleToAssume",
        validation_alias=AliasChoices("roleToAssume", "role_to_assume"),
    )
    region: str = Field(min_length=1)
    credentials: Optional[Credentials] = None

    @field_validator("credentials", mode="before")
    @classmethod
    def _blank_credentials_are_absent(cls, value: Any) -> Any:
        if isinstance(value, dict) and not any(value.values()):
            return None
        return value

    @field_validator("credentials")
    @classmethod
    def _zero_credentials_are_absent(cls, value: Optional[Credentials]) -> Optional[Credentials]:
        if value is not None and value.is_zero:
            return None
        return value

    @property
    def role_arn(self) -> str:
        return f"arn:aws:iam::{self.account_id}:role/{self.role_to_assume}"


class Configuration(BaseModel):
    """complete contents of the maroon config file."""
    profiles: Dict[str, Profile] = Field(
        default_factory=dict,
        serialization_alias="profiles",
        validation_alias=AliasChoices("profiles", "Profiles"),
    )

    @field_validator("profiles", mode="before")
    @classmethod
    def _null_profiles(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def empty(cls) -> "Configuration":
        """create empty configuration."""
        return cls(profiles={})

    @classmethod
    def from_json(cls, text: str) -> "Configuration":
        return cls.model_validate_json(text)

    def to_json(self) -> str:
        """serialize with empty fields omitted."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        if not self.profiles:
            data.pop("profiles", None)
        return json.dumps(data, indent=2) + "\n"


def _check(pattern: str, value: str, message: str) -> str:
    if not isinstance(value, str) or not re.fullmatch(pattern, value):
        raise ValidationError(message)
    return value


def validate_profile_name(name: str) -> str:
    return _check(
        PROFILE_NAME_PATTERN,
        name,
        f"Profile name '{name}' is not allowed. Profile name must only contain "
        "alphanumeric characters and the following special characters: '-'",
    )


def validate_account_id(account_id: str) -> str:
    return _check(
        ACCOUNT_ID_PATTERN,
        account_id,
        f"Account ID '{account_id}' does not match AWS account ID format",
    )


def validate_role_name(role_name: str) -> str:
    return _check(
        ROLE_NAME_PATTERN,
        role_name,
        f"Role name '{role_name}' does not match AWS role name format",
    )


def validate_region(region: str) -> str:
    return _check(REGION_PATTERN, region, f"Invalid AWS region '{region}'")
