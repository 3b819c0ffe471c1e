"""Integration tests for the public location catalog endpoints."""

import pytest
from django.core.management import call_command

from modules.locations.models import Baladiya

pytestmark = pytest.mark.integration


@pytest.fixture()
def seeded():
    call_command("seed_locations", verbosity=0)


class TestWilayaList:
    def test_lists_all_58_in_order(self, api_client, seeded):
        response = api_client.get("/api/v1/wilayas/")

        body = response.json()
        assert response.status_code == 200
        assert len(body) == 58
        assert [w["id"] for w in body] == list(range(1, 59))
        assert body[15] == {
            "id": 16,
            "name": "الجزائر",
            "name_latin": "Alger",
            "code": "16",
            "baladiya_count": 0,
        }

    def test_public(self, api_client):
        assert api_client.get("/api/v1/wilayas/").status_code == 200


class TestWilayaDetail:
    def test_detail_with_zone_and_baladiyas(self, api_client, alger_centre):
        response = api_client.get("/api/v1/wilayas/16/")

        body = response.json()
        assert response.status_code == 200
        assert body["baladiya_count"] == 1
        assert body["baladiyas"][0]["name_latin"] == "Alger Centre"
        assert body["delivery_zone"]["home_delivery_cost"] == "500.00"
        assert body["delivery_zone"]["office_delivery_cost"] == "300.00"

    @pytest.mark.parametrize("wilaya_id", [0, 59, -1])
    def test_out_of_range(self, api_client, wilaya_id):
        response = api_client.get(f"/api/v1/wilayas/{wilaya_id}/")

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "INVALID_WILAYA"

    def test_unseeded(self, api_client):
        response = api_client.get("/api/v1/wilayas/16/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "WILAYA_NOT_FOUND"


class TestBaladiyas:
    def test_list_for_wilaya(self, api_client, alger_centre, tamanrasset_commune):
        response = api_client.get("/api/v1/wilayas/16/baladiyas/")

        body = response.json()
        assert response.status_code == 200
        assert [b["id"] for b in body] == [alger_centre.id]
        assert body[0]["postal_code"] == "16001"
        assert body[0]["wilaya_id"] == 16

    def test_unknown_wilaya(self, api_client):
        response = api_client.get("/api/v1/wilayas/16/baladiyas/")
        assert response.status_code == 404


class TestSearch:
    URL = "/api/v1/locations/search/"

    def test_search_all(self, api_client, seeded):
        Baladiya.objects.create(
            id=1601, name="الجزائر الوسطى", name_latin="Alger Centre", postal_code="16001", wilaya_id=16
        )

        response = api_client.get(self.URL, {"q": "alger"})

        body = response.json()
        assert response.status_code == 200
        assert body["query"] == "alger"
        assert [w["id"] for w in body["wilayas"]] == [16]
        assert body["baladiyas"][0]["wilaya_name"] == "الجزائر"
        assert body["count"] == 2

    def test_search_by_arabic_name(self, api_client, seeded):
        response = api_client.get(self.URL, {"q": "وهران", "type": "wilaya"})

        assert [w["id"] for w in response.json()["wilayas"]] == [31]

    def test_limit(self, api_client, seeded):
        response = api_client.get(self.URL, {"q": "a", "type": "wilaya", "limit": 3})
        assert response.status_code == 400

        response = api_client.get(self.URL, {"q": "ou", "type": "wilaya", "limit": 3})
        assert len(response.json()["wilayas"]) <= 3

    @pytest.mark.parametrize(
        "params", [{"q": "a"}, {}, {"q": "alger", "limit": 0}, {"q": "alger", "limit": 51}]
    )
    def test_invalid_params(self, api_client, params):
        response = api_client.get(self.URL, params)

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"
