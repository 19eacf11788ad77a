import pytest
from pydantic import ValidationError

from py_map_dfsa.models.raw import AuthorisedIndividualRecord, CitizenshipItem

pytestmark = pytest.mark.unit


def test_record_parses_aliases(raw_record):
    record = AuthorisedIndividualRecord.model_validate(raw_record)

    assert record.record_id == "5f0c7a2e-1b3d-4c6e-9f8a-0b1c2d3e4f5a"
    assert record.firm_name == "Gulf Capital Advisors Ltd"
    assert record.country == 356960241
    assert len(record.citizenships) == 2
    assert record.citizenships[1].passport_number == "AE7654321"


def test_unknown_keys_are_ignored():
    record = AuthorisedIndividualRecord.model_validate(
        {"@odata.etag": 'W/"1"', "cr5f7_somethingnew": "value"}
    )
    assert record.record_id is None


def test_record_is_frozen(raw_record):
    record = AuthorisedIndividualRecord.model_validate(raw_record)
    with pytest.raises(ValidationError):
        record.firm_name = "changed"


@pytest.mark.parametrize(
    "column, value",
    [
        ("dfsa_hasthecandidateeverusedothernamesorchanged", "true"),
        ("dfsa_hasthecandidateeverusedothernamesorchanged", 1),
        ("dfsa_firmnamesd", 42),
        ("dfsa_countryauthindividual", [356960241]),
        ("cr5f7_AI_Q12_CandidateInfo", {"dfsa_placeofbirth": "Dubai"}),
    ],
)
def test_malformed_values_become_none(column, value, caplog):
    record = AuthorisedIndividualRecord.model_validate({column: value})

    assert all(v is None for v in record.model_dump().values())
    assert "Ignoring malformed value" in caplog.text


def test_string_codes_are_accepted():
    record = AuthorisedIndividualRecord.model_validate({"dfsa_countryauthindividual": "356960241"})
    assert record.country == "356960241"


@pytest.mark.parametrize("payload", [None, "text", 12, ["list"]])
def test_non_mapping_payload_is_empty_record(payload):
    record = AuthorisedIndividualRecord.model_validate(payload)
    assert record.record_id is None
    assert record.citizenships is None


def test_item_models_accept_python_names():
    item = CitizenshipItem(country=356960241, passport_number="P1")
    assert item.country == 356960241
    assert item.passport_number == "P1"


@pytest.mark.parametrize(
    "value, expected",
    [(356960241, 356960241), (356960241.0, 356960241), ("356960241", "356960241")],
)
def test_integral_float_codes_become_ints(value, expected):
    record = AuthorisedIndividualRecord.model_validate({"dfsa_countryauthindividual": value})
    assert record.country == expected


@pytest.mark.parametrize("value", [356960241.5, True])
def test_non_integral_codes_become_none(value, caplog):
    record = AuthorisedIndividualRecord.model_validate({"dfsa_countryauthindividual": value})

    assert record.country is None
    assert "Ignoring malformed value" in caplog.text
