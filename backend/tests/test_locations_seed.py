# backend/tests/test_locations_seed.py
import pytest

from birdsurvey.errors import SurveyValidationError
from birdsurvey.models.location import Location
from birdsurvey.services.locations.seed import read_locations_csv, seed_locations


def test_seed_inserts_and_updates_by_site_code(db, tmp_path):
    csv_path = tmp_path / "sites.csv"
    csv_path.write_text(
        "\ufeffid,site_code,site_name\n"
        "1,GB-01,Galveston Bay North (east spit)\n"
        "7,SL-02,Sabine Lake South\n"
        "\n"
        ",CC-09,Corpus Christi Flats\n",
        encoding="utf-8",
    )

    inserted, updated = seed_locations(db, read_locations_csv(csv_path))

    assert (inserted, updated) == (2, 1)
    names = {loc.site_code: (loc.id, loc.site_name) for loc in db.query(Location).all()}
    assert names["GB-01"] == (1, "Galveston Bay North (east spit)")
    assert names["SL-02"] == (7, "Sabine Lake South")
    assert names["CC-09"][1] == "Corpus Christi Flats"
    assert names["MB-04"] == (2, "Matagorda Bay East")


def test_seeded_location_names_show_in_survey_list(client, auth_headers, db, foraging_payload):
    created = client.post(
        "/waterbirdforagingsurvey", json=dict(foraging_payload, locationId=11), headers=auth_headers
    ).json()
    listed = client.get("/waterbirdforagingsurvey/user/7", headers=auth_headers).json()
    assert listed[0]["location"] == "missing"

    seed_locations(db, [{"id": "11", "site_code": "SL-02", "site_name": "Sabine Lake South"}])
    db.expire_all()

    listed = client.get("/waterbirdforagingsurvey/user/7", headers=auth_headers).json()
    assert listed[0]["surveyIdentifier"] == created["surveyIdentifier"]
    assert listed[0]["location"] == "Sabine Lake South"


def test_csv_without_site_name_column_is_rejected(tmp_path):
    csv_path = tmp_path / "sites.csv"
    csv_path.write_text("id,site_code\n1,GB-01\n", encoding="utf-8")
    with pytest.raises(SurveyValidationError):
        read_locations_csv(csv_path)


@pytest.mark.parametrize(
    "row",
    [
        {"id": "", "site_code": "", "site_name": "No code"},
        {"id": "x1", "site_code": "ZZ-01", "site_name": "Bad id"},
    ],
)
def test_bad_rows_are_rejected(db, row):
    with pytest.raises(SurveyValidationError):
        seed_locations(db, [row])
