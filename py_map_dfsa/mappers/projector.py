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
"""Projects a raw Authorised Individual record into a CanonicalDocument."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from functools import partial
from typing import Any

from py_map_dfsa.exceptions import MissingPrimaryKeyError
from py_map_dfsa.mappers.collections import (
    map_career_history,
    map_citizenship,
    map_collection,
    map_higher_education,
    map_membership,
    map_other_holding,
    map_passport_detail,
    map_qualification,
    map_regulatory_licence,
)
from py_map_dfsa.mappers.flags import derive_flags
from py_map_dfsa.mappers.sections import (
    build_application,
    build_candidate_profile,
    build_difc_disclosure,
    build_guidelines,
    build_licensed_functions,
    build_position,
    build_work_experience,
    compose_collection,
    compose_section,
    derive_visibility,
)
from py_map_dfsa.models.document import CanonicalDocument
from py_map_dfsa.models.raw import PRIMARY_KEY_FIELD, AuthorisedIndividualRecord
from py_map_dfsa.picklists.enums import PicklistRegistry, get_registry

logger = logging.getLogger(__name__)

DOCUMENT_TYPE = "AuthorisedIndividual"
TEMPLATE_VERSION = "1.0"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_record(
    record: Mapping[str, Any] | AuthorisedIndividualRecord | None,
) -> AuthorisedIndividualRecord:
    if isinstance(record, AuthorisedIndividualRecord):
        return record
    if record is None:
        raise MissingPrimaryKeyError(PRIMARY_KEY_FIELD)
    return AuthorisedIndividualRecord.model_validate(record)


def project(
    record: Mapping[str, Any] | AuthorisedIndividualRecord,
    *,
    registry: PicklistRegistry | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> CanonicalDocument:
    """Builds the canonical document for one Authorised Individual record.

    The projection is deterministic: for the same record, registry and clock
    value it always returns an equal document. Gaps in the record degrade to
    defaults; only a missing primary key is fatal.

    Args:
        record: The raw Dataverse payload, or an already parsed record.
        registry: Picklists used to resolve option-set codes. Defaults to the
            process-wide registry.
        clock: Supplies the document's ``GeneratedAt`` timestamp.

    Returns:
        The projected document.

    Raises:
        MissingPrimaryKeyError: If the record has no primary identifier.
    """
    parsed = _to_record(record)
    if parsed.record_id is None or not parsed.record_id.strip():
        logger.error("Cannot project a record without '%s'.", PRIMARY_KEY_FIELD)
        raise MissingPrimaryKeyError(PRIMARY_KEY_FIELD)

    picklists = registry if registry is not None else get_registry()
    logger.info("Projecting Authorised Individual record %s.", parsed.record_id)

    flags = derive_flags(parsed)
    visibility = derive_visibility(parsed, flags)

    document = CanonicalDocument(
        document_type=DOCUMENT_TYPE,
        template_version=TEMPLATE_VERSION,
        generated_at=clock(),
        guidelines=build_guidelines(parsed, picklists),
        difc_disclosure=build_difc_disclosure(parsed),
        application=build_application(parsed, flags, visibility, picklists),
        flags=flags,
        visibility=visibility,
        licensed_functions=compose_section(
            visibility.show_licensed_functions_section,
            lambda: build_licensed_functions(parsed, visibility, picklists),
        ),
        passport_details=map_collection(
            parsed.passport_details,
            partial(map_passport_detail, picklists=picklists),
            name="passport detail",
        ),
        citizenships=map_collection(
            parsed.citizenships,
            partial(map_citizenship, picklists=picklists),
            name="citizenship",
        ),
        regulatory_history=compose_collection(
            flags.has_regulatory_history,
            lambda: map_collection(
                parsed.regulatory_history,
                partial(map_regulatory_licence, picklists=picklists),
                name="regulatory history",
            ),
        ),
        position=build_position(parsed, flags),
        career_history=map_collection(
            parsed.career_history,
            partial(map_career_history, picklists=picklists),
            name="career history",
        ),
        candidate_profile=build_candidate_profile(parsed),
        higher_education=map_collection(
            parsed.higher_education,
            partial(map_higher_education, picklists=picklists),
            name="higher education",
        ),
        professional_qualifications=map_collection(
            parsed.professional_qualifications, map_qualification, name="professional qualification"
        ),
        other_qualifications=map_collection(
            parsed.other_qualifications, map_qualification, name="other qualification"
        ),
        professional_memberships=map_collection(
            parsed.professional_memberships, map_membership, name="professional membership"
        ),
        work_experience=build_work_experience(parsed, flags, picklists),
        other_holdings=map_collection(
            parsed.other_holdings,
            partial(map_other_holding, picklists=picklists),
            name="other holding",
        ),
    )

    logger.info(
        "Projected record %s: %d citizenship(s), %d regulatory licence(s), "
        "%d career history entries.",
        parsed.record_id,
        len(document.citizenships),
        len(document.regulatory_history),
        len(document.career_history),
    )
    return document
