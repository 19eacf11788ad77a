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
"""Pydantic models for the raw Dataverse Authorised Individual record.

Fields use readable Python names; the Dataverse column and navigation
property names are kept as aliases. The source system is authoritative and
its payloads drift, so these models never reject a record for a bad field:
a value of the wrong type is logged and treated as missing.
"""

import logging
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)


def _integral_float_to_int(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# Option-set values arrive as ints, but some connectors send them as strings
# or as integral floats such as 356960241.0.
CodeValue = Annotated[StrictInt | StrictStr, BeforeValidator(_integral_float_to_int)]

PRIMARY_KEY_FIELD = "dfsa_authorised_individualid"


class DataverseEntity(BaseModel):
    """Base model for a Dataverse entity payload.

    Unknown columns are ignored and malformed values become None.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _require_mapping(cls, data: Any) -> Any:
        if isinstance(data, BaseModel):
            return data
        if not isinstance(data, Mapping):
            logger.warning(
                "Expected an object for %s but got %s; treating it as empty.",
                cls.__name__,
                type(data).__name__,
            )
            return {}
        return dict(data)

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_malformed(cls, value: Any, handler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError:
            logger.warning(
                "Ignoring malformed value for %s.%s: %r",
                cls.__name__,
                info.field_name,
                value,
            )
            return None


class PassportDetailItem(DataverseEntity):
    """Q12 candidate information (one row per passport identity)."""

    title: CodeValue | None = Field(default=None, alias="dfsa_titlez")
    full_name: StrictStr | None = Field(
        default=None, alias="dfsa_nameasitappearsintheprincipalpassport"
    )
    date_of_birth: StrictStr | None = Field(default=None, alias="cr5f7_dateofbirth1")
    legacy_date_of_birth: StrictStr | None = Field(default=None, alias="dfsa_dateofbirth")
    place_of_birth: StrictStr | None = Field(default=None, alias="dfsa_placeofbirth")
    uae_resident: StrictBool | None = Field(default=None, alias="dfsa_uaeresident")
    number_of_citizenships: CodeValue | None = Field(default=None, alias="dfsa_no")
    other_names: StrictStr | None = Field(default=None, alias="dfsa_othernames")
    native_name: StrictStr | None = Field(
        default=None, alias="dfsa_nameinnativelanguageifapplicable"
    )


class CitizenshipItem(DataverseEntity):
    """Q13 citizenship information."""

    country: CodeValue | None = Field(default=None, alias="dfsa_countryterritory")
    passport_number: StrictStr | None = Field(default=None, alias="dfsa_passportno")
    expiry_date: StrictStr | None = Field(default=None, alias="cr5f7_expirydate1")
    legacy_expiry_date: StrictStr | None = Field(default=None, alias="dfsa_expirydate")


class RegulatoryLicenceItem(DataverseEntity):
    """Q28 licence or registration held with a regulator."""

    regulator: CodeValue | None = Field(default=None, alias="dfsa_regulator")
    date_started: StrictStr | None = Field(default=None, alias="dfsa_datestarted")
    date_finished: StrictStr | None = Field(
        default=None, alias="dfsa_datefinishedifapplicable"
    )
    licence_name: StrictStr | None = Field(
        default=None, alias="dfsa_nameoflicenseregistration"
    )
    register_name: StrictStr | None = Field(default=None, alias="dfsa_nameoflicenseregister")
    overview: StrictStr | None = Field(
        default=None, alias="dfsa_briefoverviewoflicenseregistration"
    )
    other_regulator_details: StrictStr | None = Field(
        default=None, alias="dfsa_regulatorrownumberinq28pleaseprovidedet"
    )


class CareerHistoryItem(DataverseEntity):
    """Q30 career history row."""

    activity: CodeValue | None = Field(default=None, alias="dfsa_activity")
    activity_explanation: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseexplainactivity"
    )
    establishment_name: StrictStr | None = Field(
        default=None, alias="dfsa_nameofestablishment"
    )
    date_from: StrictStr | None = Field(default=None, alias="dfsa_datefrom")
    date_to: StrictStr | None = Field(default=None, alias="dfsa_dateto")
    position_title: StrictStr | None = Field(default=None, alias="dfsa_positiontitle")
    reason_for_leaving: CodeValue | None = Field(default=None, alias="dfsa_reasonforleaving")
    reason_for_leaving_explanation: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseexplainreasonforleaving"
    )
    employer_activities: StrictStr | None = Field(
        default=None, alias="dfsa_activitiesundertakenbyemployer"
    )
    address: StrictStr | None = Field(default=None, alias="dfsa_buildingnamenumber")
    street_name: StrictStr | None = Field(default=None, alias="dfsa_streetname")
    district: StrictStr | None = Field(default=None, alias="dfsa_district")
    city: StrictStr | None = Field(default=None, alias="dfsa_city")
    post_code: StrictStr | None = Field(default=None, alias="dfsa_postcodepobox")
    telephone: StrictStr | None = Field(default=None, alias="dfsa_telephonenumber")
    contact_person: StrictStr | None = Field(
        default=None, alias="dfsa_contactpersonwithinemployer"
    )
    contact_position: StrictStr | None = Field(
        default=None, alias="dfsa_positiontitleofcontactperson"
    )
    contact_telephone: StrictStr | None = Field(
        default=None, alias="dfsa_contacttelephonenumber"
    )
    contact_email: StrictStr | None = Field(default=None, alias="dfsa_contactemailaddress")
    is_regulated: StrictBool | None = Field(default=None, alias="dfsa_iswasregulated")
    regulator: CodeValue | None = Field(default=None, alias="dfsa_pleaseselect")
    regulator_details: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseprovidedetailsoftheregulator"
    )
    activity_details: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseprovidedetailsofyouractivitieswithn"
    )


class HigherEducationItem(DataverseEntity):
    title: StrictStr | None = Field(default=None, alias="dfsa_titleofqualification")
    university_name: StrictStr | None = Field(default=None, alias="dfsa_fullnameofuniversity")
    date_of_award: StrictStr | None = Field(default=None, alias="dfsa_dateofaward")
    classification: CodeValue | None = Field(
        default=None, alias="dfsa_generalclassificationofqualification"
    )


class QualificationItem(DataverseEntity):
    """Professional or other relevant qualification (Q96 / Q99)."""

    qualification_name: StrictStr | None = Field(
        default=None, alias="dfsa_fullnameofqualification"
    )
    institute_name: StrictStr | None = Field(default=None, alias="dfsa_fullnameofinstitute")
    date_of_award: StrictStr | None = Field(default=None, alias="dfsa_dateofaward")


class MembershipItem(DataverseEntity):
    organisation_name: StrictStr | None = Field(
        default=None, alias="dfsa_fullnameoforganisation"
    )
    date_of_admission: StrictStr | None = Field(
        default=None, alias="dfsa_dateofadmissionmembership"
    )
    organisation_explanation: StrictStr | None = Field(
        default=None, alias="dfsa_briefexplanationoforganisation"
    )


class OtherHoldingItem(DataverseEntity):
    """Q117 position as Controller, Director or Partner of another entity."""

    entity_name: StrictStr | None = Field(default=None, alias="dfsa_nameofentity")
    position_details: StrictStr | None = Field(default=None, alias="dfsa_detailsofposition")
    date_from: StrictStr | None = Field(default=None, alias="dfsa_from")
    date_to: StrictStr | None = Field(default=None, alias="dfsa_toleaveblankifcurrent")
    address: StrictStr | None = Field(default=None, alias="dfsa_address")
    nature_of_business: StrictStr | None = Field(default=None, alias="dfsa_natureofbusiness")
    ownership_text: StrictStr | None = Field(default=None, alias="dfsa_ownershipifapplicable")
    ownership_percentage: StrictInt | StrictFloat | None = Field(
        default=None, alias="dfsa_auth_ind_ownershipifapplicable"
    )
    is_regulated: StrictBool | None = Field(default=None, alias="dfsa_regulated")
    regulator: CodeValue | None = Field(default=None, alias="dfsa_regulator")
    has_conflict_of_interest: StrictBool | None = Field(
        default=None, alias="dfsa_anypotentialconflictofinterest"
    )
    conflict_clarification: StrictStr | None = Field(
        default=None, alias="dfsa_potentialconflictclarification"
    )


class AuthorisedIndividualRecord(DataverseEntity):
    """A ``dfsa_authorised_individual`` record with its expanded relations.

    Every field is optional, including the primary key: whether a record
    without an identifier is usable is decided by the projection, not here.
    """

    record_id: StrictStr | None = Field(default=None, alias=PRIMARY_KEY_FIELD)
    created_on: StrictStr | None = Field(default=None, alias="createdon")
    modified_on: StrictStr | None = Field(default=None, alias="modifiedon")

    # Step 0.1 - 0.3: guidelines, disclosure consent, requestor
    guidelines_confirmation: CodeValue | None = Field(
        default=None, alias="dfsa_iconfirmthatihavecarefullyreadandup"
    )
    consent_to_disclosure: StrictBool | None = Field(
        default=None, alias="cr5f7_doyouconsenttothedisclosureoftheinformatio"
    )
    firm_name: StrictStr | None = Field(default=None, alias="dfsa_firmnamesd")
    firm_number: StrictStr | None = Field(default=None, alias="cr5f7_firmnumber")
    requestor_name: StrictStr | None = Field(
        default=None, alias="cr5f7_nameofpersonmakingthesubmission"
    )
    requestor_position: StrictStr | None = Field(
        default=None, alias="dfsa_positiontitleofcontactperson"
    )
    requestor_email: StrictStr | None = Field(default=None, alias="dfsa_ai_emailaddress")
    requestor_phone: StrictStr | None = Field(default=None, alias="dfsa_contacttelephonenumber")
    authorised_individual_name: StrictStr | None = Field(
        default=None, alias="dfsa_proposedauthorisedindividualname"
    )

    # Step 1.1: application context and identity
    applying_for_rep_office: StrictBool | None = Field(
        default=None, alias="dfsa_ai_isthecandidateapplyingonbehalfofarepres"
    )
    rep_office_function: CodeValue | None = Field(
        default=None, alias="dfsa_ai_pleaseindicatethefunctionsthecandidate"
    )
    previously_held_ai_status: StrictBool | None = Field(
        default=None, alias="dfsa_hasthecandidatepreviouslyheldauthorisedindiv"
    )
    previous_candidate_id: StrictStr | None = Field(
        default=None, alias="_cr5f7_pleaseselectcandidateup_value"
    )
    has_used_other_names: StrictBool | None = Field(
        default=None, alias="dfsa_hasthecandidateeverusedothernamesorchanged"
    )
    other_names: StrictStr | None = Field(default=None, alias="dfsa_stateothernames")
    native_name: StrictStr | None = Field(
        default=None, alias="dfsa_nameinnativelanguageifapplicable"
    )
    date_name_changed: StrictStr | None = Field(default=None, alias="cr5f7_datenamechanged1")
    name_change_reason: StrictStr | None = Field(
        default=None, alias="dfsa_reasonforchangeofname"
    )

    # Step 1.1: contact details and previous address
    address: StrictStr | None = Field(default=None, alias="dfsa_address")
    post_code: StrictStr | None = Field(default=None, alias="dfsa_postcodepobox")
    country: CodeValue | None = Field(default=None, alias="dfsa_countryauthindividual")
    mobile: StrictStr | None = Field(default=None, alias="dfsa_mobiletelephonenumber")
    email: StrictStr | None = Field(default=None, alias="dfsa_contactemailaddress")
    residence_duration: CodeValue | None = Field(
        default=None, alias="cr5f7_howlonghasthecandidateresidedattheabov"
    )
    previous_address: StrictStr | None = Field(default=None, alias="dfsa_buildingnamenumber")
    previous_post_code: StrictStr | None = Field(default=None, alias="dfsa_postcode_pobox")
    previous_country: CodeValue | None = Field(default=None, alias="dfsa_country2")

    # Step 1.1: licensed functions
    licensed_function: CodeValue | None = Field(
        default=None, alias="dfsa_pleaseselectthelicensedfunctiontobecarried"
    )
    senior_executive_officer: StrictBool | None = Field(
        default=None, alias="dfsa_ml_seniorexecutiveofficer"
    )
    finance_officer: StrictBool | None = Field(default=None, alias="dfsa_ml_financeofficer")
    compliance_officer: StrictBool | None = Field(
        default=None, alias="dfsa_ml_complianceofficer1"
    )
    mlro: StrictBool | None = Field(
        default=None, alias="dfsa_ml_moneylaunderingreportingofficer"
    )
    no_mandatory_function: StrictBool | None = Field(
        default=None, alias="dfsa_ml_nomandatoryfunction"
    )
    responsible_officer_confirmation_1: StrictStr | None = Field(
        default=None, alias="cr5f7_theapplicanthassignificantresponsibilityfort"
    )
    responsible_officer_confirmation_2: StrictStr | None = Field(
        default=None, alias="cr5f7_theapplicantexercisesasignificantinfluenceon"
    )
    responsible_officer_confirmation_3: StrictStr | None = Field(
        default=None, alias="cr5f7_theapplicantisnotanemployeeoftheauthorised"
    )
    executive_type: CodeValue | None = Field(
        default=None, alias="dfsa_ai_willthecandidatebeanexecutiveornonexecu"
    )

    # Step 1.1: position
    proposed_job_title: StrictStr | None = Field(
        default=None, alias="dfsa_whatisthecandidatesproposedjobtitle"
    )
    has_proposed_start_date: StrictBool | None = Field(
        default=None, alias="new_ai_doyouhaveproposedstartingdate"
    )
    proposed_start_date: StrictStr | None = Field(
        default=None, alias="cr5f7_whatisthecandidatesproposedstartingdate"
    )
    start_date_explanation: StrictStr | None = Field(default=None, alias="new_ai_pleaseexplain")
    holds_regulatory_licence: StrictBool | None = Field(
        default=None, alias="dfsa_doesthecandidateholdorhaspreviouslyheldin"
    )
    will_be_mlro: StrictBool | None = Field(
        default=None, alias="new_ai_willthecandidateapplyingforprincipalrepre"
    )

    # Step 2.1: candidate profile uploads
    cv_file_id: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseuploadthecandidatescurriculumvitae"
    )
    cv_file_name: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseuploadthecandidatescurriculumvitae_name"
    )
    job_description_file_id: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseuploadthecandidatesjobdescription"
    )
    job_description_file_name: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseuploadthecandidatesjobdescription_name"
    )

    # Step 2.2: work experience
    worked_in_difc: StrictBool | None = Field(
        default=None, alias="dfsa_hasthecandidatepreviouslyworkedinthedifc"
    )
    difc_experience_overview: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseprovideanoverviewofdifcexperience"
    )
    difc_knowledge_plan: StrictStr | None = Field(
        default=None, alias="dfsa_pleaseexplainhowthecandidatewillobtainrelev"
    )
    worked_in_similar_role: StrictBool | None = Field(
        default=None, alias="dfsa_hasthecandidatepreviouslyworkedinasimilarr"
    )
    years_of_experience: CodeValue | None = Field(
        default=None, alias="dfsa_howmanyyearsexperiencedoesthecandidatehave"
    )
    experience_plan: StrictStr | None = Field(
        default=None, alias="dfsa_howwillthecandidateobtaintherelevantexperie"
    )

    # Expanded related entities
    passport_details: list[PassportDetailItem] | None = Field(
        default=None, alias="cr5f7_AI_Q12_CandidateInfo"
    )
    citizenships: list[CitizenshipItem] | None = Field(
        default=None,
        alias="cr5f7_dfsa_Authorised_Individual_AI_Q13_CitizenshipInfo_dfsa_ROAF_authorised_Individual_AICIQ13",
    )
    regulatory_history: list[RegulatoryLicenceItem] | None = Field(
        default=None,
        alias="cr5f7_dfsa_Authorised_Individual_AI_Q28_LicenceDetails_dfsa_ROAF_authorised_Individual_AICIQ28",
    )
    career_history: list[CareerHistoryItem] | None = Field(
        default=None,
        alias="dfsa_Authorised_Individual_ROAF_Authorised_Individual_CHCCQ30_dfsa_ROAF_Authorised_Individual_",
    )
    higher_education: list[HigherEducationItem] | None = Field(
        default=None, alias="dfsa_Authorised_Individual_AICIQ_dfsa_ROAF_Authorised_Individual"
    )
    professional_qualifications: list[QualificationItem] | None = Field(
        default=None, alias="dfsa_Authorised_Individual_AICIQ96_dfsa_ROAF_Authorised_Individual"
    )
    other_qualifications: list[QualificationItem] | None = Field(
        default=None, alias="dfsa_Authorised_Individual_AICIQ99_dfsa_ROAF_Authorised_Individual"
    )
    professional_memberships: list[MembershipItem] | None = Field(
        default=None, alias="dfsa_Authorised_Individual_AICIQ102_dfsa_ROAF_Authorised_Individual"
    )
    other_holdings: list[OtherHoldingItem] | None = Field(
        default=None, alias="dfsa_Authorised_Individual_OPOHQ117_dfsa_ROAF_Authorised_Individual"
    )
