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
"""Renders canonical documents to HTML with Jinja2 templates."""

import logging
from pathlib import Path

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from py_map_dfsa.exceptions import TemplateRenderError
from py_map_dfsa.models.document import CanonicalDocument

logger = logging.getLogger(__name__)


def template_name(document_type: str, version: str) -> str:
    """Returns the template path for a document type and template version."""
    return f"{document_type}/{document_type}_v{version}.html.j2"


class DocumentRenderer:
    """Renders a CanonicalDocument through the template matching its type and version."""

    def __init__(self, templates_dir: Path | None = None):
        """Initializes the renderer.

        Args:
            templates_dir: Directory holding the templates. Defaults to the
                templates shipped with the package.
        """
        loader: BaseLoader
        if templates_dir is None:
            loader = PackageLoader("py_map_dfsa", "templates")
        else:
            loader = FileSystemLoader(Path(templates_dir))
        self.jinja_env = Environment(
            loader=loader,
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def has_template(self, document_type: str, version: str) -> bool:
        try:
            self.jinja_env.get_template(template_name(document_type, version))
        except TemplateNotFound:
            return False
        return True

    def render(self, document: CanonicalDocument) -> str:
        """Renders the document to an HTML string.

        Raises:
            TemplateRenderError: If the template is missing or fails to render.
        """
        name = template_name(document.document_type, document.template_version)
        logger.info("Rendering %s with template %s.", document.application.id, name)
        try:
            template = self.jinja_env.get_template(name)
            return template.render(**document.to_template_data())
        except TemplateNotFound as e:
            raise TemplateRenderError(f"Template not found: {name}") from e
        except TemplateError as e:
            logger.error("Failed to render template %s: %s", name, e)
            raise TemplateRenderError(f"Failed to render template {name}: {e}") from e
