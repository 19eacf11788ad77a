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
"""Pydantic models for the canonical Authorised Individual document.

This is the tree handed to the template renderer. Conditional sections are
typed ``X | None`` and are None exactly when their governing flag is false;
repeating sections are always lists. Field names serialize to the PascalCase
keys the document templates use.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class CanonicalModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal, populate_by_name=True, frozen=True
    )


class ConditionFlags(CanonicalModel):
    """Named booleans derived once per record; they control document shape."""

    rep_office: bool = False
    previously_held: bool = False
    other_names: bool = False
    residence_duration_less_than_3_years: bool = False
    has_start_date: bool = False
    has_regulatory_history: bool = False
    licensed_function_selected: bool = False
    has_career_history: bool = False
    has_higher_education: bool = False
    has_professional_qualifications: bool = False
    has_other_qualifications: bool = False
    has_professional_memberships: bool = False
    has_difc_experience: bool = Field(default=False, alias="HasDIFCExperience")
    has_similar_role_experience: bool = False
    has_other_holdings: bool = False


class SectionVisibility(CanonicalModel):
    """Flags derived from other flags plus raw fields."""

    show_licensed_functions_section: bool = False
    show_mandatory_functions_question: bool = False
    show_responsible_officer_confirmations: bool = False
    show_rep_office_functions: bool = False
    show_previous_candidate: bool = False


class Guidelines(CanonicalModel):
    confirm_read: str


class DifcDisclosure(CanonicalModel):
    consent_to_disclosure: bool


class Requestor(CanonicalModel):
    name: str
    position: str
    email: str
    phone: str


class Contact(CanonicalModel):
    address: str
    post_code: str
    country: str
    mobile: str
    email: str
    residence_duration: str


class PreviousAddress(CanonicalModel):
    address: str
    post_code: str
    country: str


class OtherNames(CanonicalModel):
    state_other_names: str
    native_name: str
    date_changed: str
    reason: str


class Application(CanonicalModel):
    id: str
    firm_name: str
    firm_number: str
    requestor: Requestor
    authorised_individual_name: str
    rep_office_functions: str | None = None
    previous_candidate_id: str | None = None
    contact: Contact
    previous_address: PreviousAddress | None = None
    other_names: OtherNames | None = None


class MandatoryFunctions(CanonicalModel):
    senior_executive_officer: bool
    finance_officer: bool
    compliance_officer: bool
    mlro: bool = Field(alias="MLRO")
    no_mandatory_function: bool


class ResponsibleOfficerConfirmations(CanonicalModel):
    resp_resp1: str
    resp_resp2: str
    resp_resp3: str


class LicensedFunctions(CanonicalModel):
    """Present only when the candidate is not applying for a Rep Office."""

    licensed_function_choice: str
    licensed_function_choice_label: str
    executive_type: str
    mandatory_functions: MandatoryFunctions | None = None
    responsible_officer_confirmations: ResponsibleOfficerConfirmations | None = None


class PassportDetail(CanonicalModel):
    title: str
    full_name: str
    date_of_birth: str
    place_of_birth: str
    uae_resident: bool
    number_of_citizenships: str
    other_names: str
    native_name: str


class Citizenship(CanonicalModel):
    country: str
    passport_no: str
    expiry_date: str


class RegulatoryHistoryEntry(CanonicalModel):
    regulator: str
    date_started: str
    date_finished: str | None = None
    license_name: str
    register_name: str
    overview: str
    is_other_regulator: bool
    other_regulator_details: str | None = None


class Position(CanonicalModel):
    """Exactly one of ``proposed_start_date`` and ``start_date_explanation`` is set."""

    proposed_job_title: str
    has_proposed_start_date: bool
    proposed_start_date: str | None = None
    start_date_explanation: str | None = None
    will_be_mlro: bool = Field(alias="WillBeMLRO")


class EmployerAddress(CanonicalModel):
    address: str
    street_name: str
    district: str
    city: str
    postcode_po_box: str
    telephone_number: str


class EmployerContact(CanonicalModel):
    contact_person: str
    contact_position: str
    contact_telephone: str
    contact_email: str


class CareerHistoryEntry(CanonicalModel):
    activity: str
    name_of_establishment: str
    date_from: str
    date_to: str | None = None
    position_title: str
    reason_for_leaving: str
    explain_activity: str | None = None
    explain_reason_for_leaving: str | None = None
    activities_undertaken: str
    address: EmployerAddress
    contact: EmployerContact
    is_regulated: bool
    regulator: str | None = None
    regulator_details: str | None = None
    activity_details: str


class CandidateProfile(CanonicalModel):
    cv_file_id: str | None = Field(default=None, alias="CVFileId")
    cv_file_name: str | None = Field(default=None, alias="CVFileName")
    job_description_file_id: str | None = None
    job_description_file_name: str | None = None


class HigherEducationEntry(CanonicalModel):
    title_of_qualification: str
    university_name: str
    date_of_award: str
    classification: str


class QualificationEntry(CanonicalModel):
    qualification_name: str
    institute_name: str
    date_of_award: str


class ProfessionalMembershipEntry(CanonicalModel):
    organisation_name: str
    date_of_admission: str
    organisation_explanation: str


class WorkExperience(CanonicalModel):
    """Two flag-gated pairs: DIFC overview vs plan, years vs experience plan."""

    has_difc_experience: bool = Field(alias="HasDIFCExperience")
    difc_experience_overview: str | None = Field(default=None, alias="DIFCExperienceOverview")
    difc_knowledge_plan: str | None = Field(default=None, alias="DIFCKnowledgePlan")
    has_similar_role_experience: bool
    years_of_experience: str | None = None
    experience_plan: str | None = None


class OtherHoldingEntry(CanonicalModel):
    name_of_entity: str
    details_of_position: str
    date_from: str
    date_to: str | None = None
    address: str
    nature_of_business: str
    ownership_text: str
    ownership_percentage: float | None = None
    is_regulated: bool
    regulator: str | None = None
    has_conflict_of_interest: bool
    potential_conflict_clarification: str | None = None


class CanonicalDocument(CanonicalModel):
    """The complete projected Authorised Individual application."""

    document_type: str
    template_version: str
    generated_at: datetime

    guidelines: Guidelines
    difc_disclosure: DifcDisclosure = Field(alias="DIFCDisclosure")
    application: Application
    flags: ConditionFlags
    visibility: SectionVisibility
    licensed_functions: LicensedFunctions | None = None

    passport_details: list[PassportDetail] = Field(default_factory=list)
    citizenships: list[Citizenship] = Field(default_factory=list)
    regulatory_history: list[RegulatoryHistoryEntry] = Field(default_factory=list)
    position: Position

    career_history: list[CareerHistoryEntry] = Field(default_factory=list)
    candidate_profile: CandidateProfile
    higher_education: list[HigherEducationEntry] = Field(default_factory=list)
    professional_qualifications: list[QualificationEntry] = Field(default_factory=list)
    other_qualifications: list[QualificationEntry] = Field(default_factory=list)
    professional_memberships: list[ProfessionalMembershipEntry] = Field(default_factory=list)
    work_experience: WorkExperience
    other_holdings: list[OtherHoldingEntry] = Field(default_factory=list)

    def to_template_data(self) -> dict[str, Any]:
        """Serializes the document to the JSON tree the templates consume."""
        return self.model_dump(mode="json", by_alias=True)
