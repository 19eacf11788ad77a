# Copyright 2025 Gowtham Rao <rao@ohdsi.org>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Provides a class to fetch Authorised Individual records from Dataverse."""

import asyncio
import logging
import random
import re
import time
from typing import Any

import httpx

from py_map_dfsa.config import Settings
from py_map_dfsa.exceptions import DataverseError, RecordNotFoundError
from py_map_dfsa.models.raw import AuthorisedIndividualRecord, DataverseEntity

USER_AGENT = "py-map-dfsa/0.1.0"
TOKEN_URL_TEMPLATE = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
ENTITY_SET = "dfsa_authorised_individuals"

# Tokens are refreshed this many seconds before they expire.
TOKEN_EXPIRY_MARGIN = 300

GUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

ODATA_HEADERS = {
    "Accept": "application/json",
    "OData-Version": "4.0",
    "OData-MaxVersion": "4.0",
    "Prefer": 'odata.include-annotations="*"',
}

logger = logging.getLogger(__name__)


def _column_names(model: type[DataverseEntity]) -> list[str]:
    """Returns the Dataverse column names of a model's scalar fields."""
    return [
        field.alias or name
        for name, field in model.model_fields.items()
        if not _item_model(field.annotation)
    ]


def _item_model(annotation: Any) -> type[DataverseEntity] | None:
    """Returns the item model of a ``list[Item] | None`` annotation, if any."""
    for arg in getattr(annotation, "__args__", ()):
        item_args = getattr(arg, "__args__", ())
        if item_args and isinstance(item_args[0], type) and issubclass(
            item_args[0], DataverseEntity
        ):
            return item_args[0]
    return None


def build_select() -> str:
    """Builds the ``$select`` clause for every projected column."""
    return ",".join(_column_names(AuthorisedIndividualRecord))


def build_expand() -> str:
    """Builds the ``$expand`` clause for every related entity the document uses."""
    clauses = []
    for name, field in AuthorisedIndividualRecord.model_fields.items():
        item_model = _item_model(field.annotation)
        if item_model is None:
            continue
        columns = ",".join(_column_names(item_model))
        clauses.append(f"{field.alias or name}($select={columns})")
    return ",".join(clauses)


class DataverseExtractor:
    """Extractor for fetching Authorised Individual records from the Dataverse Web API."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        rate_limit_delay: float = 0.0,
        max_retries: int = 3,
    ) -> None:
        """Initializes the extractor.

        Args:
            settings: Connection and credential settings.
            client: An httpx.AsyncClient for making requests.
            rate_limit_delay: Seconds to wait before each request.
            max_retries: Maximum number of attempts for a failed request.
        """
        self.settings = settings
        self.client = client or httpx.AsyncClient(
            follow_redirects=True,
            timeout=settings.http_timeout,
        )
        self.client.headers["User-Agent"] = USER_AGENT
        self.rate_limit_delay = rate_limit_delay
        self.max_retries = max_retries
        self._token: str | None = None
        self._token_expires_at = 0.0

    async def _get_token(self) -> str:
        """Returns a bearer token, requesting a new one close to expiry."""
        if self._token and self._token_expires_at > time.monotonic() + TOKEN_EXPIRY_MARGIN:
            logger.debug("Using cached Dataverse access token.")
            return self._token

        logger.debug("Acquiring new Dataverse access token.")
        url = TOKEN_URL_TEMPLATE.format(tenant_id=self.settings.azure_tenant_id)
        data = {
            "grant_type": "client_credentials",
            "client_id": self.settings.azure_client_id,
            "client_secret": self.settings.azure_client_secret,
            "scope": f"{self.settings.dataverse_url.rstrip('/')}/.default",
        }
        try:
            response = await self.client.post(url, data=data)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to obtain Dataverse access token: %s", e)
            raise DataverseError(f"Failed to obtain Dataverse access token: {e}") from e

        try:
            token = payload["access_token"]
            expires_in = float(payload.get("expires_in", 3600))
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Token response did not contain an access token: %s", e)
            raise DataverseError("Token response did not contain an access token.") from e
        self._token = token
        self._token_expires_at = time.monotonic() + expires_in
        return self._token

    async def _fetch_url(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Fetches a single URL with retries and exponential backoff.

        Raises:
            RecordNotFoundError: If the API answers 404. This is not retried.
            DataverseError: If every attempt fails or the body is not JSON.
        """
        last_error: httpx.HTTPError | None = None
        for attempt in range(self.max_retries):
            try:
                await asyncio.sleep(self.rate_limit_delay)
                token = await self._get_token()
                response = await self.client.get(
                    url,
                    params=params,
                    headers={**ODATA_HEADERS, "Authorization": f"Bearer {token}"},
                )
                if response.status_code == 404:
                    raise RecordNotFoundError(f"Resource not found: {url}", status_code=404)
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError as e:
                    logger.error("Response from %s is not valid JSON: %s", url, e)
                    raise DataverseError(
                        f"Response from {url} is not valid JSON.",
                        status_code=response.status_code,
                    ) from e
            except httpx.HTTPError as e:
                last_error = e
                logger.warning(
                    "Request to %s failed on attempt %d/%d: %s",
                    url,
                    attempt + 1,
                    self.max_retries,
                    e,
                )
                if attempt + 1 == self.max_retries:
                    break
                # Exponential backoff with jitter
                backoff_time = (2**attempt) + (random.uniform(0, 1))
                await asyncio.sleep(backoff_time)

        logger.error("All retries for %s failed.", url)
        status_code = (
            last_error.response.status_code
            if isinstance(last_error, httpx.HTTPStatusError)
            else None
        )
        raise DataverseError(
            f"Request to {url} failed after {self.max_retries} attempts: {last_error}",
            status_code=status_code,
        )

    async def get_authorised_individual(self, record_id: str) -> dict[str, Any]:
        """Fetches one record with all its related entities expanded.

        Args:
            record_id: The record's GUID.

        Returns:
            The raw JSON payload of the record.
        """
        if not GUID_PATTERN.match(record_id or ""):
            raise DataverseError(f"Invalid record id '{record_id}': expected a GUID.")

        logger.info("Fetching Authorised Individual %s from Dataverse.", record_id)
        url = f"{self.settings.dataverse_api_url}/{ENTITY_SET}({record_id})"
        params = {"$select": build_select(), "$expand": build_expand()}
        record = await self._fetch_url(url, params=params)
        logger.info("Fetched Authorised Individual %s.", record_id)
        return record

    async def query_authorised_individuals(
        self, filter_expr: str | None = None, top: int = 10
    ) -> list[dict[str, Any]]:
        """Lists records, newest first, optionally narrowed by an OData filter."""
        url = f"{self.settings.dataverse_api_url}/{ENTITY_SET}"
        params: dict[str, Any] = {"$top": top, "$orderby": "createdon desc"}
        if filter_expr:
            params["$filter"] = filter_expr

        logger.info("Querying Authorised Individuals (filter=%s, top=%d).", filter_expr, top)
        payload = await self._fetch_url(url, params=params)
        records = payload.get("value", [])
        logger.info("Found %d Authorised Individual record(s).", len(records))
        return records

    async def aclose(self) -> None:
        await self.client.aclose()
