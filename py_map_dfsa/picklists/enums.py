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
"""Resolves Dataverse option-set codes to human-readable labels.

Option sets are kept as data (``picklists.yaml``) and served through a single
generic resolver. Each table carries its own fallback label, returned for
missing values and for codes the table does not know.

The registry is loaded once per process and never mutated afterwards, so it
can be shared by any number of concurrent projections.
"""

import importlib.resources
import logging
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from py_map_dfsa.config import settings

logger = logging.getLogger(__name__)

CodeValue = int | str

DEFAULT_PICKLIST_RESOURCE = "picklists.yaml"


def normalize_code(code: Any) -> CodeValue | None:
    """Normalizes a raw option-set value to a lookup key.

    Numeric strings and integral floats become ints so that ``356960001``,
    ``"356960001"`` and ``356960001.0`` all address the same label. Booleans
    are not codes.

    Returns:
        The normalized code, or None if the value cannot be a code.
    """
    if code is None or isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    if isinstance(code, float):
        return int(code) if code.is_integer() else None
    if isinstance(code, str):
        text = code.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return text
    return None


@dataclass(frozen=True)
class EnumTable:
    """An immutable code-to-label lookup for one family of fields."""

    name: str
    labels: Mapping[CodeValue, str]
    fallback: str = ""

    @classmethod
    def from_mapping(
        cls, name: str, labels: Mapping[Any, Any], fallback: str = ""
    ) -> "EnumTable":
        """Builds a table, normalizing its codes and freezing the mapping."""
        normalized: dict[CodeValue, str] = {}
        for code, label in labels.items():
            key = normalize_code(code)
            if key is None:
                raise ValueError(f"Picklist '{name}' contains an invalid code: {code!r}")
            normalized[key] = str(label)
        return cls(name=name, labels=MappingProxyType(normalized), fallback=fallback)

    def __contains__(self, code: Any) -> bool:
        return normalize_code(code) in self.labels


def resolve(table: EnumTable, code: Any) -> str:
    """Looks up ``code`` in ``table``.

    Never raises: a missing value or an unknown code yields the table's
    fallback label.
    """
    key = normalize_code(code)
    if key is None:
        if code is not None:
            logger.warning("Value %r is not a valid code for picklist '%s'.", code, table.name)
        return table.fallback

    label = table.labels.get(key)
    if label is None:
        logger.warning(
            "Code %r not found in picklist '%s'; using fallback %r.",
            code,
            table.name,
            table.fallback,
        )
        return table.fallback
    return label


class PicklistRegistry:
    """A read-only collection of named EnumTables."""

    def __init__(self, tables: Mapping[str, EnumTable]):
        self._tables = MappingProxyType(dict(tables))

    def get(self, name: str) -> EnumTable:
        """Returns the table called ``name``.

        An unknown table name is a programming error, not a data gap, so it
        raises KeyError.
        """
        try:
            return self._tables[name]
        except KeyError:
            raise KeyError(f"Unknown picklist table: '{name}'") from None

    def resolve(self, name: str, code: Any) -> str:
        return resolve(self.get(name), code)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)


def parse_picklists(document: Mapping[str, Any]) -> PicklistRegistry:
    """Builds a registry from the parsed contents of a picklist YAML file."""
    tables: dict[str, EnumTable] = {}
    for name, entry in document.items():
        if not isinstance(entry, Mapping) or not isinstance(entry.get("labels"), Mapping):
            raise ValueError(f"Picklist '{name}' must define a 'labels' mapping.")
        tables[name] = EnumTable.from_mapping(
            name, entry["labels"], fallback=str(entry.get("fallback", ""))
        )
    return PicklistRegistry(tables)


def load_registry(path: Path | None = None) -> PicklistRegistry:
    """Loads picklists from ``path``, or from the packaged default file."""
    if path is None:
        source = importlib.resources.files(__package__).joinpath(DEFAULT_PICKLIST_RESOURCE)
        text = source.read_text(encoding="utf-8")
    else:
        source = Path(path)
        text = source.read_text(encoding="utf-8")

    registry = parse_picklists(yaml.safe_load(text) or {})
    logger.info("Loaded %d picklist tables from %s.", len(registry), source)
    return registry


_registry: PicklistRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> PicklistRegistry:
    """Returns the process-wide registry, loading it on first use.

    The file named by ``DFSA_PICKLIST_FILE`` is used when set. Concurrent
    first callers are serialized so the registry is only built once.
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = load_registry(settings.picklist_file)
    return _registry
