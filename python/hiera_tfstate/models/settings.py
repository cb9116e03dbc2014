# hiera_tfstate/models/settings.py

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class S3Settings(BaseSettings):
    """
    Pydantic settings for the S3 state source.
    Fields map to environment variables prefixed with `TFSTATE_S3_`,
    e.g. `TFSTATE_S3_ENDPOINT`, `TFSTATE_S3_ACCESS_KEY`.
    """

    model_config = SettingsConfigDict(env_prefix="TFSTATE_S3_")

    endpoint: str = "s3.amazonaws.com"
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    session_token: Optional[str] = None
    region: Optional[str] = None
    secure: bool = True
    retries: int = 3
    retry_delay: float = 1.0


class HttpSettings(BaseSettings):
    """
    Pydantic settings for the http state source (Terraform's http backend).
    Fields map to environment variables prefixed with `TFSTATE_HTTP_`.
    """

    model_config = SettingsConfigDict(env_prefix="TFSTATE_HTTP_")

    username: Optional[str] = None
    password: Optional[str] = None
    total_timeout: float = 10.0
    verify_ssl: bool = True
    retries: int = 3
    retry_delay: float = 1.0
