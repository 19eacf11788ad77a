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
"""Maps expanded Dataverse relations into the document's repeating sections."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from py_map_dfsa.mappers.fields import (
    date_only,
    first_date,
    is_true,
    optional_date,
    text,
)
from py_map_dfsa.models.document import (
    CareerHistoryEntry,
    Citizenship,
    EmployerAddress,
    EmployerContact,
    HigherEducationEntry,
    OtherHoldingEntry,
    PassportDetail,
    ProfessionalMembershipEntry,
    QualificationEntry,
    RegulatoryHistoryEntry,
)
from py_map_dfsa.models.raw import (
    CareerHistoryItem,
    CitizenshipItem,
    HigherEducationItem,
    MembershipItem,
    OtherHoldingItem,
    PassportDetailItem,
    QualificationItem,
    RegulatoryLicenceItem,
)
from py_map_dfsa.picklists.enums import PicklistRegistry, normalize_code

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")
EntryT = TypeVar("EntryT")

# Option-set values meaning "Other", which unlock a free-text explanation.
OTHER_REGULATOR = 356960087
OTHER_ACTIVITY = 356960005
OTHER_REASON_FOR_LEAVING = 356960005


def map_collection(
    raw_items: Any,
    item_mapper: Callable[[ItemT], EntryT],
    *,
    name: str = "collection",
) -> list[EntryT]:
    """Applies ``item_mapper`` to every raw item, preserving order and count.

    A missing relation, or one that is not a list, yields an empty list.
    Dataverse serializes an empty relation as null as often as ``[]``.
    """
    if raw_items is None:
        logger.debug("No %s records found.", name)
        return []
    if not isinstance(raw_items, list):
        logger.warning(
            "Expected a list of %s records but got %s; mapping as empty.",
            name,
            type(raw_items).__name__,
        )
        return []

    logger.debug("Mapping %d %s record(s).", len(raw_items), name)
    return [item_mapper(item) for item in raw_items]


def map_passport_detail(item: PassportDetailItem, picklists: PicklistRegistry) -> PassportDetail:
    return PassportDetail(
        title=picklists.resolve("title", item.title),
        full_name=text(item.full_name),
        date_of_birth=first_date(item.date_of_birth, item.legacy_date_of_birth),
        place_of_birth=text(item.place_of_birth),
        uae_resident=is_true(item.uae_resident),
        number_of_citizenships=picklists.resolve(
            "citizenship_count", item.number_of_citizenships
        ),
        other_names=text(item.other_names),
        native_name=text(item.native_name),
    )


def map_citizenship(item: CitizenshipItem, picklists: PicklistRegistry) -> Citizenship:
    return Citizenship(
        country=picklists.resolve("country", item.country),
        passport_no=text(item.passport_number),
        expiry_date=first_date(item.expiry_date, item.legacy_expiry_date),
    )


def map_regulatory_licence(
    item: RegulatoryLicenceItem, picklists: PicklistRegistry
) -> RegulatoryHistoryEntry:
    """Maps one licence; "Other" regulators carry their free-text details."""
    is_other = normalize_code(item.regulator) == OTHER_REGULATOR
    return RegulatoryHistoryEntry(
        regulator=picklists.resolve("regulator", item.regulator),
        date_started=date_only(item.date_started),
        date_finished=optional_date(item.date_finished),
        license_name=text(item.licence_name),
        register_name=text(item.register_name),
        overview=text(item.overview),
        is_other_regulator=is_other,
        other_regulator_details=text(item.other_regulator_details) if is_other else None,
    )


def map_career_history(
    item: CareerHistoryItem, picklists: PicklistRegistry
) -> CareerHistoryEntry:
    """Maps one career history row.

    Explanations are only carried when the matching choice is "Other", and
    regulator details only for regulated employers.
    """
    activity_is_other = normalize_code(item.activity) == OTHER_ACTIVITY
    reason_is_other = normalize_code(item.reason_for_leaving) == OTHER_REASON_FOR_LEAVING
    is_regulated = is_true(item.is_regulated)
    regulator_is_other = is_regulated and normalize_code(item.regulator) == OTHER_REGULATOR

    return CareerHistoryEntry(
        activity=picklists.resolve("activity", item.activity),
        name_of_establishment=text(item.establishment_name),
        date_from=date_only(item.date_from),
        # A blank end date means this is the current position.
        date_to=optional_date(item.date_to),
        position_title=text(item.position_title),
        reason_for_leaving=picklists.resolve("reason_for_leaving", item.reason_for_leaving),
        explain_activity=text(item.activity_explanation) if activity_is_other else None,
        explain_reason_for_leaving=(
            text(item.reason_for_leaving_explanation) if reason_is_other else None
        ),
        activities_undertaken=text(item.employer_activities),
        address=EmployerAddress(
            address=text(item.address),
            street_name=text(item.street_name),
            district=text(item.district),
            city=text(item.city),
            postcode_po_box=text(item.post_code),
            telephone_number=text(item.telephone),
        ),
        contact=EmployerContact(
            contact_person=text(item.contact_person),
            contact_position=text(item.contact_position),
            contact_telephone=text(item.contact_telephone),
            contact_email=text(item.contact_email),
        ),
        is_regulated=is_regulated,
        regulator=picklists.resolve("regulator", item.regulator) if is_regulated else None,
        regulator_details=text(item.regulator_details) if regulator_is_other else None,
        activity_details=text(item.activity_details),
    )


def map_higher_education(
    item: HigherEducationItem, picklists: PicklistRegistry
) -> HigherEducationEntry:
    return HigherEducationEntry(
        title_of_qualification=text(item.title),
        university_name=text(item.university_name),
        date_of_award=date_only(item.date_of_award),
        classification=picklists.resolve("qualification_classification", item.classification),
    )


def map_qualification(item: QualificationItem) -> QualificationEntry:
    return QualificationEntry(
        qualification_name=text(item.qualification_name),
        institute_name=text(item.institute_name),
        date_of_award=date_only(item.date_of_award),
    )


def map_membership(item: MembershipItem) -> ProfessionalMembershipEntry:
    return ProfessionalMembershipEntry(
        organisation_name=text(item.organisation_name),
        date_of_admission=date_only(item.date_of_admission),
        organisation_explanation=text(item.organisation_explanation),
    )


def map_other_holding(item: OtherHoldingItem, picklists: PicklistRegistry) -> OtherHoldingEntry:
    is_regulated = is_true(item.is_regulated)
    has_conflict = is_true(item.has_conflict_of_interest)
    return OtherHoldingEntry(
        name_of_entity=text(item.entity_name),
        details_of_position=text(item.position_details),
        date_from=date_only(item.date_from),
        date_to=optional_date(item.date_to),
        address=text(item.address),
        nature_of_business=text(item.nature_of_business),
        ownership_text=text(item.ownership_text),
        ownership_percentage=item.ownership_percentage,
        is_regulated=is_regulated,
        regulator=picklists.resolve("regulator", item.regulator) if is_regulated else None,
        has_conflict_of_interest=has_conflict,
        potential_conflict_clarification=(
            text(item.conflict_clarification) if has_conflict else None
        ),
    )
