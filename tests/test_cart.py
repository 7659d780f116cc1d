"""
Cart and checkout workflow.
"""
from conftest import auth, create_course

from src.repositories.mongo_repository import MongoRepository
from src.services.cart_service import CartService


class TestCartItems:
    def test_get_creates_empty_cart_once(self, client, student):
        _, token = student
        first = client.get("/api/v1/cart", headers=auth(token)).json()["data"]
        second = client.get("/api/v1/cart", headers=auth(token)).json()["data"]
        assert first["items"] == [] and first["_id"] == second["_id"]
        assert MongoRepository("carts").count() == 1

    def test_adding_same_course_accumulates_quantity(self, client, student, course):
        _, token = student
        client.post("/api/v1/cart", json={"courseId": course["_id"]}, headers=auth(token))
        res = client.post("/api/v1/cart", json={"courseId": course["_id"], "quantity": 2}, headers=auth(token))
        items = res.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 3

    def test_add_rejects_missing_course_and_bad_quantity(self, client, student):
        _, token = student
        res = client.post("/api/v1/cart", json={"courseId": "5f0000000000000000000000"}, headers=auth(token))
        assert res.status_code == 404
        res = client.post("/api/v1/cart", json={"courseId": "x", "quantity": 0}, headers=auth(token))
        assert res.status_code == 400
        assert res.json()["error"] == "Validation failed"

    def test_update_and_remove_item(self, client, student, course):
        _, token = student
        cart = client.post("/api/v1/cart", json={"courseId": course["_id"]}, headers=auth(token)).json()["data"]
        item_id = cart["items"][0]["_id"]

        res = client.put(f"/api/v1/cart/{item_id}", json={"quantity": 4}, headers=auth(token))
        assert res.json()["data"]["items"][0]["quantity"] == 4

        res = client.put(f"/api/v1/cart/{item_id}", json={"quantity": 0}, headers=auth(token))
        assert res.json()["data"]["items"] == []

        res = client.delete(f"/api/v1/cart/{item_id}", headers=auth(token))
        assert res.status_code == 404

    def test_populated_cart_and_total(self, client, admin, student):
        _, token = student
        a = create_course(client, admin[1], title="Course A", price=10)
        b = create_course(client, admin[1], title="Course B", price=25.5)
        client.post("/api/v1/cart", json={"courseId": a["_id"], "quantity": 2}, headers=auth(token))
        client.post("/api/v1/cart", json={"courseId": b["_id"]}, headers=auth(token))

        total = client.get("/api/v1/cart/total", headers=auth(token)).json()["data"]
        assert total == {"total": 45.5, "itemCount": 3}

        cart = client.get("/api/v1/cart", headers=auth(token)).json()["data"]
        titles = sorted(i["course"]["title"] for i in cart["items"])
        assert titles == ["Course A", "Course B"]

    def test_total_without_cart(self, client, student):
        res = client.get("/api/v1/cart/total", headers=auth(student[1]))
        assert res.json()["data"] == {"total": 0, "itemCount": 0}

    def test_clear(self, client, student, course):
        _, token = student
        client.post("/api/v1/cart", json={"courseId": course["_id"]}, headers=auth(token))
        res = client.delete("/api/v1/cart", headers=auth(token))
        assert res.json()["data"]["items"] == []

    def test_cart_requires_login(self, client):
        res = client.get("/api/v1/cart")
        assert res.status_code == 401
        assert res.json() == {"success": False, "error": "Not authorized to access this route"}


class TestCheckout:
    def test_checkout_enrolls_and_clears(self, client, admin, student):
        user, token = student
        a = create_course(client, admin[1], title="Course A")
        b = create_course(client, admin[1], title="Course B")
        for c in (a, b):
            client.post("/api/v1/cart", json={"courseId": c["_id"]}, headers=auth(token))

        res = client.post("/api/v1/cart/checkout", headers=auth(token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert len(data["enrollments"]) == 2
        assert all(e["paymentStatus"] == "completed" for e in data["enrollments"])
        assert data["cart"]["items"] == []

        me = client.get("/api/v1/auth/me", headers=auth(token)).json()["data"]
        assert sorted(me["enrolledCourses"]) == sorted([a["_id"], b["_id"]])
        assert client.get(f"/api/v1/courses/{a['_id']}").json()["data"]["totalStudentsEnrolled"] == 1

    def test_checkout_empty_cart_is_rejected(self, client, student, course):
        _, token = student
        client.post("/api/v1/cart", json={"courseId": course["_id"]}, headers=auth(token))
        assert client.post("/api/v1/cart/checkout", headers=auth(token)).status_code == 200

        res = client.post("/api/v1/cart/checkout", headers=auth(token))
        assert res.status_code == 400
        assert res.json()["error"] == "Cart is empty"
        assert MongoRepository("enrollments").count() == 1

    def test_checkout_skips_existing_enrollment(self, client, student, course):
        _, token = student
        client.post("/api/v1/enrollments", json={"courseId": course["_id"]}, headers=auth(token))
        client.post("/api/v1/cart", json={"courseId": course["_id"]}, headers=auth(token))

        data = client.post("/api/v1/cart/checkout", headers=auth(token)).json()["data"]
        assert data["enrollments"] == []
        assert data["skipped"] == [course["_id"]]
        assert MongoRepository("enrollments").count() == 1

    def test_checkout_with_deleted_course_writes_nothing(self, client, admin, student):
        _, token = student
        a = create_course(client, admin[1], title="Course A")
        b = create_course(client, admin[1], title="Course B")
        for c in (a, b):
            client.post("/api/v1/cart", json={"courseId": c["_id"]}, headers=auth(token))
        client.delete(f"/api/v1/courses/{b['_id']}", headers=auth(admin[1]))

        res = client.post("/api/v1/cart/checkout", headers=auth(token))
        assert res.status_code == 404
        assert MongoRepository("enrollments").count() == 0
        assert len(client.get("/api/v1/cart", headers=auth(token)).json()["data"]["items"]) == 2

    def test_line_added_during_checkout_stays_in_cart(self, client, admin, student, monkeypatch):
        user, token = student
        a = create_course(client, admin[1], title="Course A")
        b = create_course(client, admin[1], title="Course B")
        client.post("/api/v1/cart", json={"courseId": a["_id"]}, headers=auth(token))

        svc = CartService()
        original = svc.enrollment_svc.create_enrollment
        state = {"added": False}

        def create_enrollment(*args, **kwargs):
            # the user adds course B from another tab while checkout is enrolling
            if not state["added"]:
                state["added"] = True
                svc.add_item(user["_id"], b["_id"])
            return original(*args, **kwargs)

        monkeypatch.setattr(svc.enrollment_svc, "create_enrollment", create_enrollment)
        out = svc.checkout(user["_id"])

        assert [e["course"] for e in out["enrollments"]] == [a["_id"]]
        assert [i["course"] for i in out["cart"]["items"]] == [b["_id"]]
        assert MongoRepository("enrollments").count({"course": b["_id"]}) == 0
