"""
hiera_tfstate/utils/sources.py

Defines the sources a raw Terraform state document can be loaded from:
  - FileStateSource: a local terraform.tfstate
  - S3StateSource:   an object in S3 (or any S3-compatible store such as MinIO)
  - HttpStateSource: a Terraform `http` backend

Each source returns the raw bytes of the state; parsing and validation are left
to hiera_tfstate.core. A missing state raises SourceNotFoundError, any other
failure raises SourceUnavailableError. The network sources retry
SourceUnavailableError a few times; SourceNotFoundError is never retried.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import aiofiles
import aiohttp
from minio import Minio
from minio.credentials import AWSConfigProvider
from minio.error import S3Error

from hiera_tfstate.errors import (
    SourceNotFoundError,
    SourceUnavailableError,
    UnsupportedBackendError,
)
from hiera_tfstate.models.options import LookupOptions
from hiera_tfstate.models.settings import HttpSettings, S3Settings
from hiera_tfstate.utils.async_retry import async_retry

logger = logging.getLogger(__name__)

_S3_NOT_FOUND_CODES = ("NoSuchKey", "NoSuchBucket", "NoSuchObject")


class StateSource(ABC):
    """Abstract base class for loading a raw Terraform state document."""

    backend: str = ""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the state (path, s3:// URI, URL)."""

    @abstractmethod
    async def read(self) -> bytes:
        """
        Read the raw state document.

        Returns:
            bytes: The state file contents.

        Raises:
            SourceNotFoundError: If there is no state at the location.
            SourceUnavailableError: If the state could not be read.
        """


class FileStateSource(StateSource):
    """Reads the state from a local file."""

    backend = "file"

    def __init__(self, statefile: str) -> None:
        """
        Args:
            statefile (str): Path to the state file.
        """
        self.statefile = statefile

    @property
    def location(self) -> str:
        return self.statefile

    async def read(self) -> bytes:
        logger.debug("Reading terraform state from %s", self.statefile)
        try:
            async with aiofiles.open(self.statefile, "rb") as fh:
                return await fh.read()
        except FileNotFoundError as ex:
            raise SourceNotFoundError(self.backend, self.location) from ex
        except OSError as ex:
            raise SourceUnavailableError(
                self.backend, self.location, ex.strerror or str(ex)
            ) from ex


class S3StateSource(StateSource):
    """Reads the state from an object in an S3-compatible bucket.

    The blocking minio client runs in the default executor.
    """

    backend = "s3"

    def __init__(
        self,
        bucket: str,
        key: str,
        *,
        settings: Optional[S3Settings] = None,
        profile: Optional[str] = None,
        endpoint: Optional[str] = None,
        region: Optional[str] = None,
        client: Optional[Minio] = None,
    ) -> None:
        """
        Initialize an S3StateSource.

        Args:
            bucket (str): Bucket holding the state.
            key (str): Object key of the state.
            settings (Optional[S3Settings]): Connection settings; read from the
                environment when omitted.
            profile (Optional[str]): AWS shared-credentials profile to use instead
                of the keys in the settings.
            endpoint (Optional[str]): Overrides settings.endpoint.
            region (Optional[str]): Overrides settings.region.
            client (Optional[Minio]): A preconfigured client; skips client creation.
        """
        self.bucket = bucket
        self.key = key
        self.settings = settings or S3Settings()
        self.profile = profile
        self.endpoint = endpoint or self.settings.endpoint
        self.region = region or self.settings.region
        self._client = client

    @property
    def location(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    def _get_client(self) -> Minio:
        """Create (once) the minio client for this source."""
        if self._client is None:
            credentials = (
                AWSConfigProvider(profile=self.profile) if self.profile else None
            )
            self._client = Minio(
                endpoint=self.endpoint.replace("http://", "").replace("https://", ""),
                access_key=self.settings.access_key,
                secret_key=self.settings.secret_key,
                session_token=self.settings.session_token,
                secure=self.settings.secure,
                region=self.region,
                credentials=credentials,
            )
        return self._client

    def _fetch(self) -> bytes:
        """Blocking download of the state object."""
        response = None
        try:
            response = self._get_client().get_object(
                bucket_name=self.bucket, object_name=self.key
            )
            return response.read()
        except S3Error as ex:
            if ex.code in _S3_NOT_FOUND_CODES:
                raise SourceNotFoundError(self.backend, self.location) from ex
            raise SourceUnavailableError(
                self.backend, self.location, f"{ex.code}: {ex.message}"
            ) from ex
        except Exception as ex:
            raise SourceUnavailableError(self.backend, self.location, str(ex)) from ex
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    async def _read_once(self) -> bytes:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._fetch)

    async def read(self) -> bytes:
        logger.debug("Downloading terraform state from %s", self.location)
        read_with_retry = async_retry(
            retries=self.settings.retries,
            delay=self.settings.retry_delay,
            retry_on=(SourceUnavailableError,),
        )(self._read_once)
        return await read_with_retry()


class HttpStateSource(StateSource):
    """Reads the state from a Terraform http backend (GET <address>)."""

    backend = "http"

    def __init__(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        settings: Optional[HttpSettings] = None,
    ) -> None:
        """
        Initialize an HttpStateSource.

        Args:
            url (str): The backend address.
            headers (Optional[Dict[str, str]]): Extra request headers.
            timeout (Optional[float]): Total timeout; overrides settings.total_timeout.
            settings (Optional[HttpSettings]): Auth/timeout/retry settings; read
                from the environment when omitted.
        """
        self.url = url
        self.headers = dict(headers or {})
        self.settings = settings or HttpSettings()
        self._timeout = aiohttp.ClientTimeout(
            total=timeout or self.settings.total_timeout
        )

    @property
    def location(self) -> str:
        return self.url

    def _auth(self) -> Optional[aiohttp.BasicAuth]:
        if self.settings.username is None:
            return None
        return aiohttp.BasicAuth(self.settings.username, self.settings.password or "")

    async def _read_once(self) -> bytes:
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(
                    self.url,
                    headers=self.headers,
                    auth=self._auth(),
                    ssl=self.settings.verify_ssl,
                ) as resp:
                    # The http backend answers 404 (or 204) when there is no state yet.
                    if resp.status in (404, 204):
                        raise SourceNotFoundError(self.backend, self.location)
                    if resp.status >= 300:
                        text = await resp.text()
                        raise SourceUnavailableError(
                            self.backend,
                            self.location,
                            f"status={resp.status}, response={text}",
                        )
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as ex:
            raise SourceUnavailableError(
                self.backend, self.location, str(ex) or type(ex).__name__
            ) from ex

    async def read(self) -> bytes:
        logger.debug("Fetching terraform state from %s", self.location)
        read_with_retry = async_retry(
            retries=self.settings.retries,
            delay=self.settings.retry_delay,
            retry_on=(SourceUnavailableError,),
        )(self._read_once)
        return await read_with_retry()


def get_state_source(
    options: LookupOptions,
    *,
    s3_settings: Optional[S3Settings] = None,
    http_settings: Optional[HttpSettings] = None,
) -> StateSource:
    """
    Build the state source for the configured backend.

    Args:
        options (LookupOptions): Validated backend options.
        s3_settings (Optional[S3Settings]): Settings for the s3 backend.
        http_settings (Optional[HttpSettings]): Settings for the http backend.

    Returns:
        StateSource: The source to read the raw state from.

    Raises:
        UnsupportedBackendError: If `options.backend` is not file, s3 or http.
    """
    if options.backend == "file":
        assert options.statefile is not None
        return FileStateSource(options.statefile)
    if options.backend == "s3":
        assert options.bucket is not None and options.key is not None
        return S3StateSource(
            options.bucket,
            options.key,
            settings=s3_settings,
            profile=options.profile,
            endpoint=options.endpoint,
            region=options.region,
        )
    if options.backend == "http":
        assert options.url is not None
        return HttpStateSource(
            options.url,
            headers=options.headers,
            timeout=options.timeout,
            settings=http_settings,
        )
    raise UnsupportedBackendError(options.backend)
