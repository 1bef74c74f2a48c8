"""
MWS configuration.

MWSConfig is the per-call configuration every operation receives. It
accepts the field names Amazon uses on the wire (``SellerId``,
``AWSAccessKeyId`` ...) as well as snake_case names.

MWSSettings loads the same values from the environment or a .env file.
"""
from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mws_sdk.errors import ConfigurationError

DEFAULT_SERVICES_HOST = "mws.amazonservices.com"


def _describe(exc: ValidationError) -> str:
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    return ", ".join(fields) or str(exc)


class MWSConfig(BaseModel):
    """Credentials and target host for MWS requests."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    amazon_services_url: str = Field(..., alias="AmazonServicesURL", min_length=1)
    seller_id: str = Field(..., alias="SellerId", min_length=1)
    aws_access_key_id: str = Field(..., alias="AWSAccessKeyId", min_length=1)
    secret_key: str = Field(..., alias="SecretKey", min_length=1)
    mws_auth_token: Optional[str] = Field(default=None, alias="MWSAuthToken")

    @field_validator("amazon_services_url")
    @classmethod
    def _bare_host(cls, value: str) -> str:
        host = value.strip()
        for scheme in ("https://", "http://"):
            if host.lower().startswith(scheme):
                host = host[len(scheme):]
        host = host.rstrip("/")
        if not host:
            raise ValueError("host cannot be empty")
        return host

    @field_validator("mws_auth_token")
    @classmethod
    def _blank_token_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def host(self) -> str:
        return self.amazon_services_url

    @classmethod
    def coerce(cls, config: Any) -> MWSConfig:
        """
        Turn a caller supplied configuration into an MWSConfig.

        Raises:
            ConfigurationError: If the value is not a mapping or a field is
                missing or empty.
        """
        if isinstance(config, cls):
            return config
        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"MWS configuration must be a mapping, got {type(config).__name__}"
            )
        try:
            return cls.model_validate(dict(config))
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid MWS configuration: {_describe(exc)}"
            ) from exc


class MWSSettings(BaseSettings):
    """
    MWS settings.
    Loaded from the environment or .env file with exact variable name matching.
    """

    amazon_services_url: str = Field(
        default=DEFAULT_SERVICES_HOST, alias="AMAZON_SERVICES_URL"
    )
    seller_id: str = Field(..., alias="SELLER_ID")
    aws_access_key_id: str = Field(..., alias="AWS_ACCESS_KEY_ID")
    secret_key: str = Field(..., alias="MWS_SECRET_KEY")
    mws_auth_token: Optional[str] = Field(default=None, alias="MWS_AUTH_TOKEN")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def to_config(self) -> MWSConfig:
        return MWSConfig.coerce(
            {
                "AmazonServicesURL": self.amazon_services_url,
                "SellerId": self.seller_id,
                "AWSAccessKeyId": self.aws_access_key_id,
                "SecretKey": self.secret_key,
                "MWSAuthToken": self.mws_auth_token,
            }
        )


@lru_cache()
def get_settings() -> MWSSettings:
    try:
        return MWSSettings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid MWS settings: {_describe(exc)}") from exc
