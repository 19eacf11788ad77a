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
"""Command-line interface for projecting and rendering Authorised Individual records."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import typer
import yaml

from py_map_dfsa.config import Settings
from py_map_dfsa.exceptions import DfsaMappingError
from py_map_dfsa.extractor.dataverse import DataverseExtractor
from py_map_dfsa.mappers.projector import project
from py_map_dfsa.models.document import CanonicalDocument
from py_map_dfsa.picklists.enums import PicklistRegistry, load_registry
from py_map_dfsa.renderers.html import DocumentRenderer

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Project Dataverse Authorised Individual records into documents.")


def load_config(config_file: str | None) -> dict[str, Any]:
    """Loads configuration overrides from a YAML file."""
    if config_file:
        try:
            with open(config_file, "r") as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Config file not found: %s", config_file)
    return {}


def _build_settings(config_file: str | None) -> Settings:
    settings = Settings(**load_config(config_file))
    logging.getLogger().setLevel(settings.log_level.upper())
    return settings


def _registry_for(settings: Settings) -> PicklistRegistry | None:
    # None makes the projection use the process-wide default registry.
    if settings.picklist_file:
        return load_registry(settings.picklist_file)
    return None


def _read_record(record_file: Path) -> dict[str, Any]:
    try:
        with open(record_file, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read record file %s: %s", record_file, e)
        raise typer.Exit(code=1) from e


def _write_output(content: str, output: Path | None) -> None:
    if output is None:
        typer.echo(content)
        return
    output.write_text(content, encoding="utf-8")
    logger.info("Wrote %s", output)


def _document_json(document: CanonicalDocument) -> str:
    return json.dumps(document.to_template_data(), indent=2, ensure_ascii=False)


@app.command("project")
def project_command(
    record_file: Path = typer.Argument(..., help="Path to a Dataverse record JSON file."),
    output: Path = typer.Option(None, "--output", "-o", help="Write the document JSON here."),
    config_file: str = typer.Option(None, help="Path to YAML config file."),
):
    """Projects a raw record file into canonical document JSON."""
    settings = _build_settings(config_file)
    record = _read_record(record_file)
    try:
        document = project(record, registry=_registry_for(settings))
    except DfsaMappingError as e:
        logger.error("Projection failed: %s", e)
        raise typer.Exit(code=1) from e
    _write_output(_document_json(document), output)


@app.command("render")
def render_command(
    record_file: Path = typer.Argument(..., help="Path to a Dataverse record JSON file."),
    output: Path = typer.Option(..., "--output", "-o", help="Write the HTML document here."),
    config_file: str = typer.Option(None, help="Path to YAML config file."),
):
    """Projects a raw record file and renders it to HTML."""
    settings = _build_settings(config_file)
    record = _read_record(record_file)
    try:
        document = project(record, registry=_registry_for(settings))
        html = DocumentRenderer(settings.templates_dir).render(document)
    except DfsaMappingError as e:
        logger.error("Rendering failed: %s", e)
        raise typer.Exit(code=1) from e
    _write_output(html, output)


async def afetch(
    record_id: str, settings: Settings, extractor: DataverseExtractor | None = None
) -> dict[str, Any]:
    """Fetches one raw record, closing the extractor's client afterwards."""
    extractor = extractor or DataverseExtractor(settings)
    try:
        return await extractor.get_authorised_individual(record_id)
    finally:
        await extractor.aclose()


@app.command("fetch")
def fetch_command(
    record_id: str = typer.Argument(..., help="GUID of the Authorised Individual record."),
    output: Path = typer.Option(None, "--output", "-o", help="Write the result here."),
    html: bool = typer.Option(False, "--html", help="Render HTML instead of JSON."),
    config_file: str = typer.Option(None, help="Path to YAML config file."),
):
    """Fetches a record from Dataverse and projects it."""
    settings = _build_settings(config_file)
    try:
        record = asyncio.run(afetch(record_id, settings))
        document = project(record, registry=_registry_for(settings))
        if html:
            content = DocumentRenderer(settings.templates_dir).render(document)
        else:
            content = _document_json(document)
    except DfsaMappingError as e:
        logger.error("Fetch failed: %s", e)
        raise typer.Exit(code=1) from e
    _write_output(content, output)


def main():
    app()


if __name__ == "__main__":
    main()
