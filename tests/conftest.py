import copy
from datetime import datetime, timezone

import pytest

from py_map_dfsa.picklists import enums
from py_map_dfsa.picklists.enums import load_registry

RECORD_ID = "5f0c7a2e-1b3d-4c6e-9f8a-0b1c2d3e4f5a"
FIXED_TIME = datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)

CITIZENSHIPS_KEY = (
    "cr5f7_dfsa_Authorised_Individual_AI_Q13_CitizenshipInfo"
    "_dfsa_ROAF_authorised_Individual_AICIQ13"
)
REGULATORY_HISTORY_KEY = (
    "cr5f7_dfsa_Authorised_Individual_AI_Q28_LicenceDetails"
    "_dfsa_ROAF_authorised_Individual_AICIQ28"
)
CAREER_HISTORY_KEY = (
    "dfsa_Authorised_Individual_ROAF_Authorised_Individual_CHCCQ30"
    "_dfsa_ROAF_Authorised_Individual_"
)
OTHER_HOLDINGS_KEY = "dfsa_Authorised_Individual_OPOHQ117_dfsa_ROAF_Authorised_Individual"

SAMPLE_RECORD = {
    "@odata.etag": 'W/"1234567"',
    "dfsa_authorised_individualid": RECORD_ID,
    "createdon": "2025-01-10T08:00:00Z",
    "dfsa_iconfirmthatihavecarefullyreadandup": 356960001,
    "cr5f7_doyouconsenttothedisclosureoftheinformatio": True,
    "dfsa_firmnamesd": "Gulf Capital Advisors Ltd",
    "cr5f7_firmnumber": "F001234",
    "cr5f7_nameofpersonmakingthesubmission": "Sarah Ahmed",
    "dfsa_positiontitleofcontactperson": "Head of Compliance",
    "dfsa_ai_emailaddress": "sarah.ahmed@example.com",
    "dfsa_contacttelephonenumber": "+971 4 000 0000",
    "dfsa_proposedauthorisedindividualname": "John Smith",
    "dfsa_ai_isthecandidateapplyingonbehalfofarepres": False,
    "dfsa_hasthecandidatepreviouslyheldauthorisedindiv": False,
    "dfsa_hasthecandidateeverusedothernamesorchanged": True,
    "dfsa_stateothernames": "Jonathan Smith",
    "dfsa_nameinnativelanguageifapplicable": "",
    "cr5f7_datenamechanged1": "2010-06-01T00:00:00Z",
    "dfsa_reasonforchangeofname": "Preferred name",
    "dfsa_address": "Level 5, Gate Building, DIFC",
    "dfsa_postcodepobox": "PO Box 1234",
    "dfsa_countryauthindividual": 356960241,
    "dfsa_mobiletelephonenumber": "+971 50 000 0000",
    "dfsa_contactemailaddress": "john.smith@example.com",
    "cr5f7_howlonghasthecandidateresidedattheabov": 612320000,
    "dfsa_buildingnamenumber": "221B Baker Street",
    "dfsa_postcode_pobox": "NW1 6XE",
    "dfsa_country2": 356960240,
    "dfsa_pleaseselectthelicensedfunctiontobecarried": 1,
    "dfsa_ml_seniorexecutiveofficer": True,
    "dfsa_ml_financeofficer": False,
    "dfsa_ml_complianceofficer1": False,
    "dfsa_ml_moneylaunderingreportingofficer": False,
    "dfsa_ml_nomandatoryfunction": False,
    "dfsa_ai_willthecandidatebeanexecutiveornonexecu": 356960000,
    "dfsa_whatisthecandidatesproposedjobtitle": "Chief Executive Officer",
    "new_ai_doyouhaveproposedstartingdate": True,
    "cr5f7_whatisthecandidatesproposedstartingdate": "2025-03-01T00:00:00Z",
    "new_ai_pleaseexplain": "Awaiting notice period",
    "dfsa_doesthecandidateholdorhaspreviouslyheldin": True,
    "new_ai_willthecandidateapplyingforprincipalrepre": False,
    "dfsa_pleaseuploadthecandidatescurriculumvitae": "file-001",
    "dfsa_pleaseuploadthecandidatescurriculumvitae_name": "john_smith_cv.pdf",
    "dfsa_hasthecandidatepreviouslyworkedinthedifc": False,
    "dfsa_pleaseprovideanoverviewofdifcexperience": "Five years at a DIFC bank",
    "dfsa_pleaseexplainhowthecandidatewillobtainrelev": "DIFC induction programme",
    "dfsa_hasthecandidatepreviouslyworkedinasimilarr": True,
    "dfsa_howmanyyearsexperiencedoesthecandidatehave": 356960003,
    "cr5f7_AI_Q12_CandidateInfo": [
        {
            "dfsa_titlez": 356960000,
            "dfsa_nameasitappearsintheprincipalpassport": "John Smith",
            "cr5f7_dateofbirth1": "1980-05-20T00:00:00Z",
            "dfsa_placeofbirth": "London",
            "dfsa_uaeresident": True,
            "dfsa_no": 356960001,
        }
    ],
    CITIZENSHIPS_KEY: [
        {
            "dfsa_countryterritory": 356960240,
            "dfsa_passportno": "GB1234567",
            "cr5f7_expirydate1": "2030-01-01T00:00:00Z",
        },
        {
            "dfsa_countryterritory": 356960241,
            "dfsa_passportno": "AE7654321",
            "dfsa_expirydate": "2029-07-15T00:00:00Z",
        },
    ],
    REGULATORY_HISTORY_KEY: [
        {
            "dfsa_regulator": 356960002,
            "dfsa_datestarted": "2012-01-01T00:00:00Z",
            "dfsa_datefinishedifapplicable": "2018-12-31T00:00:00Z",
            "dfsa_nameoflicenseregistration": "SMF1 Chief Executive",
            "dfsa_nameoflicenseregister": "Financial Services Register",
            "dfsa_briefoverviewoflicenseregistration": "Approved person",
            "dfsa_regulatorrownumberinq28pleaseprovidedet": "FCA reference 123",
        },
        {
            "dfsa_regulator": 356960087,
            "dfsa_datestarted": "2019-01-01T00:00:00Z",
            "dfsa_nameoflicenseregistration": "Investment Adviser",
            "dfsa_nameoflicenseregister": "Local Register",
            "dfsa_briefoverviewoflicenseregistration": "Adviser licence",
            "dfsa_regulatorrownumberinq28pleaseprovidedet": "Capital Markets Authority",
        },
    ],
    CAREER_HISTORY_KEY: [
        {
            "dfsa_activity": 356960000,
            "dfsa_nameofestablishment": "Barclays Bank PLC",
            "dfsa_datefrom": "2012-01-01T00:00:00Z",
            "dfsa_dateto": "2018-12-31T00:00:00Z",
            "dfsa_positiontitle": "Managing Director",
            "dfsa_reasonforleaving": 356960001,
            "dfsa_iswasregulated": True,
            "dfsa_pleaseselect": 356960002,
        },
        {
            "dfsa_activity": 356960005,
            "dfsa_pleaseexplainactivity": "Sabbatical",
            "dfsa_datefrom": "2019-01-01T00:00:00Z",
            "dfsa_reasonforleaving": 356960005,
            "dfsa_pleaseexplainreasonforleaving": "Returned to industry",
            "dfsa_iswasregulated": False,
            "dfsa_pleaseselect": 356960002,
        },
    ],
    OTHER_HOLDINGS_KEY: [
        {
            "dfsa_nameofentity": "Smith Family Holdings",
            "dfsa_detailsofposition": "Director",
            "dfsa_from": "2015-04-01T00:00:00Z",
            "dfsa_regulated": False,
            "dfsa_regulator": 356960002,
            "dfsa_anypotentialconflictofinterest": True,
            "dfsa_potentialconflictclarification": "Family investment vehicle",
            "dfsa_auth_ind_ownershipifapplicable": 25.5,
        }
    ],
}


@pytest.fixture
def raw_record():
    """A complete raw record; each test gets its own copy to modify."""
    return copy.deepcopy(SAMPLE_RECORD)


@pytest.fixture(scope="session")
def registry():
    return load_registry()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def reset_registry(monkeypatch):
    """Clears the process-wide picklist registry for the duration of a test."""
    monkeypatch.setattr(enums, "_registry", None)
