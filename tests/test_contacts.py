"""
Contact form and its best-effort admin notification.
"""
import smtplib

from conftest import auth

from src.config import settings
from src.utils import notifier

CONTACT = {
    "fullName": "Jane Doe",
    "email": "jane@example.com",
    "subject": "Group pricing",
    "description": "Do you offer discounts for teams of ten?",
}


class TestContacts:
    def test_submit_without_smtp_still_succeeds(self, client):
        res = client.post("/api/v1/contacts", json=CONTACT)
        assert res.status_code == 201
        assert res.json()["data"]["isRead"] is False

    def test_notification_failure_is_swallowed(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise smtplib.SMTPException("relay down")

        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
        monkeypatch.setattr(smtplib, "SMTP", broken)
        assert client.post("/api/v1/contacts", json=CONTACT).status_code == 201

    def test_notification_is_sent_to_admin(self, client, monkeypatch):
        sent = []
        monkeypatch.setattr(notifier, "send_email", lambda to, subject, message: sent.append((to, subject)))
        client.post("/api/v1/contacts", json=CONTACT)
        assert sent == [(settings.ADMIN_EMAIL, "New Contact Form Submission: Group pricing")]

    def test_invalid_email(self, client):
        res = client.post("/api/v1/contacts", json={**CONTACT, "email": "not-an-email"})
        assert res.status_code == 400

    def test_admin_management(self, client, admin):
        token = admin[1]
        created = client.post("/api/v1/contacts", json=CONTACT).json()["data"]
        client.post("/api/v1/contacts", json={**CONTACT, "subject": "Other"})

        assert client.get("/api/v1/contacts/unread/count", headers=auth(token)).json()["data"]["count"] == 2
        res = client.put(f"/api/v1/contacts/{created['_id']}", json={"isRead": True}, headers=auth(token))
        assert res.json()["data"]["isRead"] is True
        assert client.get("/api/v1/contacts/unread/count", headers=auth(token)).json()["data"]["count"] == 1

        listed = client.get("/api/v1/contacts", params={"isRead": "false"}, headers=auth(token)).json()
        assert listed["total"] == 1

        assert client.delete(f"/api/v1/contacts/{created['_id']}", headers=auth(token)).status_code == 200
        assert client.get(f"/api/v1/contacts/{created['_id']}", headers=auth(token)).status_code == 404

    def test_only_isread_is_mutable(self, client, admin):
        created = client.post("/api/v1/contacts", json=CONTACT).json()["data"]
        res = client.put(f"/api/v1/contacts/{created['_id']}", json={"subject": "x"}, headers=auth(admin[1]))
        assert res.status_code == 400

    def test_students_cannot_read_contacts(self, client, student):
        assert client.get("/api/v1/contacts", headers=auth(student[1])).status_code == 401
