"""
Integration tests for the disease reference API.
"""
import pytest


@pytest.mark.integration
class TestDiseases:
    def test_list_all_stages(self, client):
        data = client.get("/diseases").json()

        assert [entry["stage"] for entry in data] == ["H0", "N0", "S1", "S2", "S3"]

    def test_get_stage(self, client):
        response = client.get("/diseases/S3")

        assert response.status_code == 200
        data = response.json()
        assert data["severity"] == 3
        assert data["severityLabel"] == "High Severity"
        assert data["treatmentSections"][0]["label"] == "Immediate Actions"
        assert "visualDescription" in data

    def test_stage_is_case_insensitive(self, client):
        assert client.get("/diseases/h0").json()["stage"] == "H0"

    def test_unknown_stage(self, client):
        response = client.get("/diseases/S9")

        assert response.status_code == 404
