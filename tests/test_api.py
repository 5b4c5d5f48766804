"""
API tests for the /analyze endpoint.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import app, build_model, AnalyzeRequest
from stressframe import SupportKind


@pytest.fixture
def client():
    return TestClient(app)


def cantilever_payload(**overrides):
    payload = {
        "nodes": [
            {"x": 0.0, "z": 0.0, "support": "fixed"},
            {"x": 3.0, "z": 0.0},
        ],
        "members": [{
            "node_i": 0,
            "node_j": 1,
            "E": 210e9,
            "strength": {"kind": "steel", "F": 235e6},
            "section": {"area": 0.01, "i_strong": 8e-6, "i_weak": 2e-6, "j": 1e-6,
                        "z_strong": 1e-4, "z_weak": 4e-5},
        }],
        "nodal_loads": [{"node": 1, "force": [0.0, 0.0, -1000.0]}],
    }
    payload.update(overrides)
    return payload


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert "version" in data


class TestAnalyze:

    def test_cantilever_round_trip(self, client):
        response = client.post("/analyze", json=cantilever_payload())
        assert response.status_code == 200
        data = response.json()

        assert data["planar"] is True
        assert len(data["displacements"]) == 2
        assert data["displacements"][1]["uz"] < 0
        assert data["reactions"][0]["Rz"] == pytest.approx(1000.0)
        assert data["section_checks"][0]["status"] == "OK"
        # zero axial force: infinite safety factor is sent as null
        assert data["buckling"][0]["status"] == "no buckling"
        assert data["buckling"][0]["safety_factor"] is None
        assert data["ltb"][0]["status"] == "data missing"

    def test_engineering_units_match_si(self, client):
        si = client.post("/analyze", json=cantilever_payload()).json()

        eng_payload = cantilever_payload(units="engineering")
        eng_payload["members"][0].update({
            "E": 210000.0,
            "strength": {"kind": "steel", "F": 235.0},
            "section": {"area": 100.0, "i_strong": 800.0, "i_weak": 200.0, "j": 100.0,
                        "z_strong": 100.0, "z_weak": 40.0},
        })
        eng_payload["nodal_loads"] = [{"node": 1, "force": [0.0, 0.0, -1.0]}]
        eng = client.post("/analyze", json=eng_payload).json()

        assert eng["displacements"][1]["uz"] == pytest.approx(si["displacements"][1]["uz"])
        assert eng["section_checks"][0]["ratio"] == pytest.approx(si["section_checks"][0]["ratio"])

    def test_section_by_name(self, client):
        payload = cantilever_payload()
        del payload["members"][0]["section"]
        payload["members"][0]["section_name"] = "H-300x150x6.5x9"
        data = client.post("/analyze", json=payload).json()
        assert data["ltb"][0]["status"] in ("OK", "NG")

    def test_pinned_end_and_short_term(self, client):
        payload = cantilever_payload(duration="short")
        payload["nodes"][1]["support"] = "roller"
        payload["members"][0]["end_j"] = {"kind": "pin"}
        data = client.post("/analyze", json=payload).json()
        assert data["member_forces"][0]["My_j"] == pytest.approx(0.0, abs=1e-6)
        assert data["end_displacements"][0]["member"] == 0

    def test_wood_preset(self, client):
        payload = cantilever_payload()
        payload["members"][0]["strength"] = {"kind": "wood", "preset": "sugi"}
        data = client.post("/analyze", json=payload).json()
        assert data["ltb"][0]["status"] == "not applicable"


class TestErrors:

    def test_unknown_support(self, client):
        payload = cantilever_payload()
        payload["nodes"][0]["support"] = "banana"
        response = client.post("/analyze", json=payload)
        assert response.status_code == 422
        assert response.json()["error"] == "InvalidPropertyError"

    def test_bad_reference(self, client):
        payload = cantilever_payload(nodal_loads=[{"node": 9, "force": [0.0, 0.0, -1.0]}])
        response = client.post("/analyze", json=payload)
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "InvalidReferenceError"
        assert body["element"] == "nodal load 0"

    def test_instability_causes(self, client):
        payload = cantilever_payload()
        payload["nodes"][0]["support"] = "free"
        response = client.post("/analyze", json=payload)
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "StructuralInstabilityError"
        assert body["causes"]

    def test_missing_section(self, client):
        payload = cantilever_payload()
        del payload["members"][0]["section"]
        response = client.post("/analyze", json=payload)
        assert response.status_code == 422
        assert response.json()["element"] == "member 0"

    def test_schema_validation(self, client):
        payload = cantilever_payload(nodal_loads=[{"node": 1, "force": [0.0, -1.0]}])
        response = client.post("/analyze", json=payload)
        assert response.status_code == 422


def test_build_model_parses_labels():
    request = AnalyzeRequest(**cantilever_payload())
    model = build_model(request)
    assert model.nodes[0].support is SupportKind.FIXED
    assert model.members[0].section.area == pytest.approx(0.01)
