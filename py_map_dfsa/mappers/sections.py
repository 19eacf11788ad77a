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
"""Composes the conditional sections of the canonical document.

A conditional section is built only when its governing flag is set; its
builder is never called otherwise, so a section that is absent cannot carry
stale data. Flag-gated field pairs are composed in a single call so that
exactly one side of the pair is populated.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from py_map_dfsa.mappers.fields import date_only, is_true, text
from py_map_dfsa.models.document import (
    Application,
    CandidateProfile,
    ConditionFlags,
    Contact,
    DifcDisclosure,
    Guidelines,
    LicensedFunctions,
    MandatoryFunctions,
    OtherNames,
    Position,
    PreviousAddress,
    Requestor,
    ResponsibleOfficerConfirmations,
    SectionVisibility,
    WorkExperience,
)
from py_map_dfsa.models.raw import AuthorisedIndividualRecord
from py_map_dfsa.picklists.enums import PicklistRegistry, normalize_code

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

# Licensed function option value for "Responsible Officer".
RESPONSIBLE_OFFICER = 4


def compose_section(flag: bool, builder: Callable[[], T]) -> T | None:
    """Returns ``builder()`` when ``flag`` is set, otherwise None."""
    if not flag:
        return None
    return builder()


def compose_collection(flag: bool, builder: Callable[[], list[T]]) -> list[T]:
    """Like ``compose_section`` but an absent collection is an empty list."""
    if not flag:
        return []
    return builder()


def compose_exclusive_pair(
    flag: bool, when_true: Callable[[], T], when_false: Callable[[], U]
) -> tuple[T | None, U | None]:
    """Builds one side of a flag-gated pair and leaves the other None.

    Builders must return a value (an empty string for a missing raw field),
    never None, so that exactly one element of the result is populated.
    """
    if flag:
        return when_true(), None
    return None, when_false()


def derive_visibility(
    record: AuthorisedIndividualRecord, flags: ConditionFlags
) -> SectionVisibility:
    """Computes the flags that depend on other flags.

    The licensed function questions only apply outside a Rep Office
    application, and which of them is asked depends on the chosen function.
    """
    choice = normalize_code(record.licensed_function)
    in_licensed_flow = not flags.rep_office

    return SectionVisibility(
        show_licensed_functions_section=in_licensed_flow,
        show_mandatory_functions_question=(
            in_licensed_flow
            and flags.licensed_function_selected
            and choice != RESPONSIBLE_OFFICER
        ),
        show_responsible_officer_confirmations=(
            in_licensed_flow and choice == RESPONSIBLE_OFFICER
        ),
        show_rep_office_functions=flags.rep_office,
        show_previous_candidate=flags.previously_held,
    )


def build_guidelines(
    record: AuthorisedIndividualRecord, picklists: PicklistRegistry
) -> Guidelines:
    return Guidelines(
        confirm_read=picklists.resolve("guidelines_confirm", record.guidelines_confirmation)
    )


def build_difc_disclosure(record: AuthorisedIndividualRecord) -> DifcDisclosure:
    return DifcDisclosure(consent_to_disclosure=is_true(record.consent_to_disclosure))


def build_contact(record: AuthorisedIndividualRecord, picklists: PicklistRegistry) -> Contact:
    return Contact(
        address=text(record.address),
        post_code=text(record.post_code),
        country=picklists.resolve("country", record.country),
        mobile=text(record.mobile),
        email=text(record.email),
        residence_duration=picklists.resolve("residence_duration", record.residence_duration),
    )


def build_previous_address(
    record: AuthorisedIndividualRecord, picklists: PicklistRegistry
) -> PreviousAddress:
    return PreviousAddress(
        address=text(record.previous_address),
        post_code=text(record.previous_post_code),
        country=picklists.resolve("country", record.previous_country),
    )


def build_other_names(record: AuthorisedIndividualRecord) -> OtherNames:
    return OtherNames(
        state_other_names=text(record.other_names),
        native_name=text(record.native_name),
        date_changed=date_only(record.date_name_changed),
        reason=text(record.name_change_reason),
    )


def build_application(
    record: AuthorisedIndividualRecord,
    flags: ConditionFlags,
    visibility: SectionVisibility,
    picklists: PicklistRegistry,
) -> Application:
    """Builds Step 1.1 application details with its conditional sub-sections."""
    return Application(
        id=text(record.record_id),
        firm_name=text(record.firm_name),
        firm_number=text(record.firm_number),
        requestor=Requestor(
            name=text(record.requestor_name),
            position=text(record.requestor_position),
            email=text(record.requestor_email),
            phone=text(record.requestor_phone),
        ),
        authorised_individual_name=text(record.authorised_individual_name),
        rep_office_functions=compose_section(
            visibility.show_rep_office_functions,
            lambda: picklists.resolve("rep_office_function", record.rep_office_function),
        ),
        previous_candidate_id=compose_section(
            visibility.show_previous_candidate,
            lambda: text(record.previous_candidate_id),
        ),
        contact=build_contact(record, picklists),
        previous_address=compose_section(
            flags.residence_duration_less_than_3_years,
            lambda: build_previous_address(record, picklists),
        ),
        other_names=compose_section(flags.other_names, lambda: build_other_names(record)),
    )


def build_mandatory_functions(record: AuthorisedIndividualRecord) -> MandatoryFunctions:
    return MandatoryFunctions(
        senior_executive_officer=is_true(record.senior_executive_officer),
        finance_officer=is_true(record.finance_officer),
        compliance_officer=is_true(record.compliance_officer),
        mlro=is_true(record.mlro),
        no_mandatory_function=is_true(record.no_mandatory_function),
    )


def build_responsible_officer_confirmations(
    record: AuthorisedIndividualRecord,
) -> ResponsibleOfficerConfirmations:
    return ResponsibleOfficerConfirmations(
        resp_resp1=text(record.responsible_officer_confirmation_1),
        resp_resp2=text(record.responsible_officer_confirmation_2),
        resp_resp3=text(record.responsible_officer_confirmation_3),
    )


def build_licensed_functions(
    record: AuthorisedIndividualRecord,
    visibility: SectionVisibility,
    picklists: PicklistRegistry,
) -> LicensedFunctions:
    """Builds the licensed function section and its two nested sections."""
    return LicensedFunctions(
        licensed_function_choice=picklists.resolve(
            "licensed_function_key", record.licensed_function
        ),
        licensed_function_choice_label=picklists.resolve(
            "licensed_function", record.licensed_function
        ),
        executive_type=picklists.resolve("executive_type", record.executive_type),
        mandatory_functions=compose_section(
            visibility.show_mandatory_functions_question,
            lambda: build_mandatory_functions(record),
        ),
        responsible_officer_confirmations=compose_section(
            visibility.show_responsible_officer_confirmations,
            lambda: build_responsible_officer_confirmations(record),
        ),
    )


def build_position(record: AuthorisedIndividualRecord, flags: ConditionFlags) -> Position:
    start_date, explanation = compose_exclusive_pair(
        flags.has_start_date,
        lambda: date_only(record.proposed_start_date),
        lambda: text(record.start_date_explanation),
    )
    return Position(
        proposed_job_title=text(record.proposed_job_title),
        has_proposed_start_date=flags.has_start_date,
        proposed_start_date=start_date,
        start_date_explanation=explanation,
        will_be_mlro=is_true(record.will_be_mlro),
    )


def build_candidate_profile(record: AuthorisedIndividualRecord) -> CandidateProfile:
    return CandidateProfile(
        cv_file_id=record.cv_file_id,
        cv_file_name=record.cv_file_name,
        job_description_file_id=record.job_description_file_id,
        job_description_file_name=record.job_description_file_name,
    )


def build_work_experience(
    record: AuthorisedIndividualRecord,
    flags: ConditionFlags,
    picklists: PicklistRegistry,
) -> WorkExperience:
    """Builds Step 2.2, which holds two independent exclusive pairs."""
    overview, knowledge_plan = compose_exclusive_pair(
        flags.has_difc_experience,
        lambda: text(record.difc_experience_overview),
        lambda: text(record.difc_knowledge_plan),
    )
    years, experience_plan = compose_exclusive_pair(
        flags.has_similar_role_experience,
        lambda: picklists.resolve("years_of_experience", record.years_of_experience),
        lambda: text(record.experience_plan),
    )
    return WorkExperience(
        has_difc_experience=flags.has_difc_experience,
        difc_experience_overview=overview,
        difc_knowledge_plan=knowledge_plan,
        has_similar_role_experience=flags.has_similar_role_experience,
        years_of_experience=years,
        experience_plan=experience_plan,
    )
