"""
Error envelope rendered by the global handlers.
"""
from src.utils.errors import ConflictError, ForbiddenError, NotFoundError


class TestErrorKinds:
    def test_not_found_message(self):
        err = NotFoundError("Course", "abc")
        assert err.status_code == 404
        assert err.to_dict() == {"success": False, "error": "Course not found with id of abc"}

    def test_status_codes(self):
        assert ForbiddenError().status_code == 401
        assert ConflictError("dup").status_code == 409


class TestEnvelope:
    def test_health(self, client):
        assert client.get("/").json()["success"] is True

    def test_unknown_id_is_404(self, client):
        res = client.get("/api/v1/courses/not-an-object-id")
        assert res.status_code == 404
        assert res.json() == {"success": False, "error": "Course not found with id of not-an-object-id"}

    def test_unknown_route_uses_envelope(self, client):
        res = client.get("/api/v1/nothing-here")
        assert res.status_code == 404
        assert res.json()["success"] is False

    def test_invalid_json_body(self, client):
        res = client.post("/api/v1/auth/login", content="{not json", headers={"Content-Type": "application/json"})
        assert res.status_code == 400
        assert res.json()["error"] == "Validation failed"
