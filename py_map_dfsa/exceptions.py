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
"""Exception types raised by the mapping pipeline and its collaborators."""


class DfsaMappingError(Exception):
    """Base class for all errors raised by py-map-dfsa."""


class ProjectionError(DfsaMappingError):
    """The projection engine refused to build a document from the record."""


class MissingPrimaryKeyError(ProjectionError):
    """The raw record does not carry its primary identifier.

    This is the only data problem the projection treats as fatal: every other
    gap degrades to a default value.
    """

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Record is missing its primary key field '{field_name}'.")


class DataverseError(DfsaMappingError):
    """A request to the Dataverse Web API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RecordNotFoundError(DataverseError):
    """The requested Dataverse record does not exist."""


class TemplateRenderError(DfsaMappingError):
    """A document template could not be found or rendered."""
