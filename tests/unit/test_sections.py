from unittest.mock import MagicMock

import pytest

from py_map_dfsa.mappers.flags import derive_flags
from py_map_dfsa.mappers.sections import (
    RESPONSIBLE_OFFICER,
    build_application,
    build_licensed_functions,
    build_position,
    build_work_experience,
    compose_collection,
    compose_exclusive_pair,
    compose_section,
    derive_visibility,
)
from py_map_dfsa.models.raw import AuthorisedIndividualRecord

pytestmark = pytest.mark.unit


def _record(raw):
    return AuthorisedIndividualRecord.model_validate(raw)


def test_compose_section_skips_builder_when_flag_is_false():
    builder = MagicMock(return_value="built")
    assert compose_section(False, builder) is None
    builder.assert_not_called()


def test_compose_section_calls_builder_when_flag_is_true():
    builder = MagicMock(return_value="built")
    assert compose_section(True, builder) == "built"
    builder.assert_called_once()


def test_compose_collection_absent_is_empty_list():
    builder = MagicMock(return_value=[1, 2])
    assert compose_collection(False, builder) == []
    builder.assert_not_called()
    assert compose_collection(True, builder) == [1, 2]


@pytest.mark.parametrize("flag", [True, False])
def test_compose_exclusive_pair_populates_exactly_one_side(flag):
    first, second = compose_exclusive_pair(flag, lambda: "", lambda: "")
    assert (first is None) != (second is None)
    assert (first is not None) is flag


@pytest.mark.parametrize(
    "rep_office, choice, mandatory, responsible",
    [
        (False, 1, True, False),
        (False, 3, True, False),
        (False, RESPONSIBLE_OFFICER, False, True),
        (False, None, False, False),
        (True, 1, False, False),
        (True, RESPONSIBLE_OFFICER, False, False),
    ],
)
def test_derive_visibility_licensed_function_questions(
    rep_office, choice, mandatory, responsible
):
    record = _record(
        {
            "dfsa_ai_isthecandidateapplyingonbehalfofarepres": rep_office,
            "dfsa_pleaseselectthelicensedfunctiontobecarried": choice,
        }
    )
    visibility = derive_visibility(record, derive_flags(record))

    assert visibility.show_licensed_functions_section is (not rep_office)
    assert visibility.show_rep_office_functions is rep_office
    assert visibility.show_mandatory_functions_question is mandatory
    assert visibility.show_responsible_officer_confirmations is responsible


def test_previous_address_present_for_short_residence(raw_record, registry):
    record = _record(raw_record)
    flags = derive_flags(record)
    application = build_application(record, flags, derive_visibility(record, flags), registry)

    assert application.previous_address is not None
    assert application.previous_address.address == "221B Baker Street"
    assert application.previous_address.post_code == "NW1 6XE"
    assert application.previous_address.country == "United Kingdom"
    assert application.contact.residence_duration == "Less than 3 years"


def test_previous_address_absent_for_long_residence(raw_record, registry):
    raw_record["cr5f7_howlonghasthecandidateresidedattheabov"] = 612320001
    record = _record(raw_record)
    flags = derive_flags(record)
    application = build_application(record, flags, derive_visibility(record, flags), registry)

    assert application.previous_address is None
    assert application.contact.residence_duration == "3 years or more"


def test_rep_office_and_previous_candidate_sections(raw_record, registry):
    raw_record["dfsa_ai_isthecandidateapplyingonbehalfofarepres"] = True
    raw_record["dfsa_ai_pleaseindicatethefunctionsthecandidate"] = 356960000
    raw_record["dfsa_hasthecandidatepreviouslyheldauthorisedindiv"] = True
    raw_record["_cr5f7_pleaseselectcandidateup_value"] = "c0ffee00-0000-0000-0000-000000000001"
    record = _record(raw_record)
    flags = derive_flags(record)
    application = build_application(record, flags, derive_visibility(record, flags), registry)

    assert application.rep_office_functions == "Principal Representative"
    assert application.previous_candidate_id == "c0ffee00-0000-0000-0000-000000000001"


def test_rep_office_functions_absent_outside_rep_office(raw_record, registry):
    raw_record["dfsa_ai_pleaseindicatethefunctionsthecandidate"] = 356960000
    record = _record(raw_record)
    flags = derive_flags(record)
    application = build_application(record, flags, derive_visibility(record, flags), registry)

    assert application.rep_office_functions is None
    assert application.previous_candidate_id is None


def test_other_names_section(raw_record, registry):
    record = _record(raw_record)
    flags = derive_flags(record)
    application = build_application(record, flags, derive_visibility(record, flags), registry)

    assert application.other_names.state_other_names == "Jonathan Smith"
    assert application.other_names.date_changed == "2010-06-01"


def test_licensed_functions_with_mandatory_functions(raw_record, registry):
    record = _record(raw_record)
    visibility = derive_visibility(record, derive_flags(record))

    section = build_licensed_functions(record, visibility, registry)

    assert section.licensed_function_choice == "LicensedDirector"
    assert section.licensed_function_choice_label == "Licensed Director"
    assert section.executive_type == "Executive"
    assert section.mandatory_functions.senior_executive_officer is True
    assert section.responsible_officer_confirmations is None


def test_licensed_functions_for_responsible_officer(raw_record, registry):
    raw_record["dfsa_pleaseselectthelicensedfunctiontobecarried"] = RESPONSIBLE_OFFICER
    raw_record["cr5f7_theapplicanthassignificantresponsibilityfort"] = "Confirmed"
    record = _record(raw_record)
    visibility = derive_visibility(record, derive_flags(record))

    section = build_licensed_functions(record, visibility, registry)

    assert section.licensed_function_choice == "ResponsibleOfficer"
    assert section.mandatory_functions is None
    assert section.responsible_officer_confirmations.resp_resp1 == "Confirmed"
    assert section.responsible_officer_confirmations.resp_resp2 == ""


def test_position_with_start_date(raw_record):
    record = _record(raw_record)
    position = build_position(record, derive_flags(record))

    assert position.proposed_start_date == "2025-03-01"
    assert position.start_date_explanation is None


def test_position_without_start_date_uses_explanation(raw_record):
    raw_record["new_ai_doyouhaveproposedstartingdate"] = False
    del raw_record["new_ai_pleaseexplain"]
    record = _record(raw_record)
    position = build_position(record, derive_flags(record))

    assert position.proposed_start_date is None
    assert position.start_date_explanation == ""


def test_work_experience_pairs(raw_record, registry):
    record = _record(raw_record)
    experience = build_work_experience(record, derive_flags(record), registry)

    assert experience.difc_experience_overview is None
    assert experience.difc_knowledge_plan == "DIFC induction programme"
    assert experience.years_of_experience == "Not Specified"
    assert experience.experience_plan is None
