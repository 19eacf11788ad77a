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
"""Scalar field helpers shared by the section and collection mappers."""


def text(value: str | None) -> str:
    """Returns the value, or an empty string when it is missing."""
    return value or ""


def date_only(value: str | None) -> str:
    """Strips the time component from a Dataverse date-time string.

    Dataverse serializes date-only columns as ``2024-03-01T00:00:00Z``; the
    document only ever shows the date part.
    """
    if not value:
        return ""
    return value.split("T", 1)[0]


def first_date(*values: str | None) -> str:
    """Returns the first populated date among columns that replaced each other."""
    for value in values:
        formatted = date_only(value)
        if formatted:
            return formatted
    return ""


def optional_date(value: str | None) -> str | None:
    """Like ``date_only`` but keeps "not provided" distinguishable as None."""
    return date_only(value) or None


def is_true(value: bool | None) -> bool:
    return value is True
