"""Integration tests for API routes."""
from fastapi import status


class TestServiceRoutes:
    """Test service info endpoints."""

    def test_root(self, test_client):
        response = test_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "running"

    def test_request_id_header(self, test_client):
        """Every response carries a request id."""
        response = test_client.get("/health")
        assert "X-Request-ID" in response.headers

    def test_debug_flag_comes_from_settings(self, test_client):
        """DEBUG in the environment switches FastAPI debug mode."""
        from main import app
        from app.core.config import settings

        assert app.debug is settings.debug


class TestRosterRoutes:
    """Test roster and stateless view endpoints."""

    def test_list_students(self, test_client):
        """Students come back in file order with the 'class' key."""
        response = test_client.get("/students")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [s["student_id"] for s in data] == ["S1", "S2"]
        assert data[0]["class"] == "4B"

    def test_view_with_default_state(self, test_client):
        response = test_client.post("/view", json={})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["aggregate"]["retention"] == 85.0
        assert data["radar_profile"] == []

    def test_view_with_search(self, test_client):
        """Search narrows rows but not charts."""
        response = test_client.post("/view", json={"search_text": "bob"})

        data = response.json()
        assert [r["name"] for r in data["sorted_rows"]] == ["Bob"]
        assert [r["name"] for r in data["skill_vs_score"]] == ["Ann", "Bob"]

    def test_view_with_sort(self, test_client):
        response = test_client.post(
            "/view", json={"sort_field": "comprehension", "sort_order": "asc"}
        )
        assert [r["name"] for r in response.json()["sorted_rows"]] == ["Bob", "Ann"]

    def test_view_rejects_unknown_sort_field(self, test_client):
        response = test_client.post("/view", json={"sort_field": "shoe_size"})
        assert response.status_code == 422


class TestSessionRoutes:
    """Test the session-driven dashboard flow."""

    def _create(self, client) -> str:
        response = client.post("/sessions")
        assert response.status_code == status.HTTP_201_CREATED
        return response.json()["session_id"]

    def test_create_session(self, test_client):
        response = test_client.post("/sessions")

        data = response.json()
        assert data["session_id"]
        assert data["view"]["state"] == {
            "selected_id": "",
            "search_text": "",
            "sort_field": None,
            "sort_order": "asc",
        }

    def test_select_student(self, test_client):
        session_id = self._create(test_client)

        response = test_client.put(f"/sessions/{session_id}/selection", json={"student_id": "S1"})

        data = response.json()
        assert data["aggregate"]["comprehension"] == 80.0
        assert [p["skill"] for p in data["radar_profile"]] == [
            "Comprehension", "Attention", "Focus", "Retention", "Assessment"
        ]

    def test_search_then_read_back(self, test_client):
        """State persists for the lifetime of the session."""
        session_id = self._create(test_client)
        test_client.put(f"/sessions/{session_id}/search", json={"text": "ANN"})

        data = test_client.get(f"/sessions/{session_id}").json()
        assert data["state"]["search_text"] == "ANN"
        assert [r["name"] for r in data["sorted_rows"]] == ["Ann"]

    def test_header_clicks(self, test_client):
        session_id = self._create(test_client)

        first = test_client.post(f"/sessions/{session_id}/sort", json={"field": "name"}).json()
        second = test_client.post(f"/sessions/{session_id}/sort", json={"field": "name"}).json()

        assert first["state"]["sort_order"] == "asc"
        assert second["state"]["sort_order"] == "desc"
        assert [r["name"] for r in second["sorted_rows"]] == ["Bob", "Ann"]

    def test_unknown_header(self, test_client):
        session_id = self._create(test_client)

        response = test_client.post(f"/sessions/{session_id}/sort", json={"field": "shoe_size"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_session(self, test_client):
        response = test_client.get("/sessions/does-not-exist")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_session(self, test_client):
        session_id = self._create(test_client)

        assert test_client.delete(f"/sessions/{session_id}").status_code == status.HTTP_200_OK
        assert test_client.get(f"/sessions/{session_id}").status_code == status.HTTP_404_NOT_FOUND
        assert test_client.delete(f"/sessions/{session_id}").status_code == status.HTTP_404_NOT_FOUND
