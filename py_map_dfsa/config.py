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
"""Manages the application's configuration using Pydantic."""

from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Manages configuration for the application.

    Reads settings from environment variables with the prefix 'DFSA_'.
    """

    model_config = SettingsConfigDict(env_prefix="DFSA_")

    # Dataverse Web API
    dataverse_url: str = "https://localhost.crm.dynamics.com"
    dataverse_api_version: str = "v9.2"
    http_timeout: float = 30.0

    # Azure AD app registration used for the client-credentials flow.
    # S105: Empty secrets are only usable against a mocked API.
    # In production, these must be set via environment variables.
    azure_tenant_id: str = ""
    azure_client_id: str = ""
    azure_client_secret: str = ""

    # Static data
    picklist_file: Path | None = None
    templates_dir: Path | None = None

    log_level: str = "INFO"

    @computed_field
    @property
    def dataverse_api_url(self) -> str:
        """Base URL of the versioned Dataverse Web API."""
        return f"{self.dataverse_url.rstrip('/')}/api/data/{self.dataverse_api_version}"


# Instantiate the settings so it can be imported directly
settings = Settings()
