# src/services/contact_service.py
from typing import Any, Dict
import logging

from src.config import settings
from src.repositories.mongo_repository import MongoRepository
from src.utils import notifier
from src.utils.errors import NotFoundError
from src.utils.query_engine import QueryResult, run_query


class ContactService:
    def __init__(self):
        self.repo = MongoRepository("contacts")

    def submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        contact = self.repo.create({**payload, "isRead": False})
        logging.info(f"[contacts.submit] {contact['_id']} de {contact['email']}")

        # notificación al admin: si falla, el envío del formulario igual es exitoso
        notifier.notify(
            settings.ADMIN_EMAIL,
            f"New Contact Form Submission: {contact['subject']}",
            (
                "A new contact form has been submitted:\n\n"
                f"Name: {contact['fullName']}\n"
                f"Email: {contact['email']}\n"
                f"Subject: {contact['subject']}\n"
                f"Message: {contact['description']}"
            ),
        )
        return contact

    def list(self, params) -> QueryResult:
        return run_query(self.repo, params)

    def get(self, contact_id: str) -> Dict[str, Any]:
        contact = self.repo.find_one(contact_id)
        if not contact:
            raise NotFoundError("Contact", contact_id)
        return contact

    def mark_read(self, contact_id: str, is_read: bool = True) -> Dict[str, Any]:
        # isRead es el único campo mutable de un contacto
        contact = self.repo.update(contact_id, {"isRead": bool(is_read)})
        if not contact:
            raise NotFoundError("Contact", contact_id)
        return contact

    def delete(self, contact_id: str) -> None:
        if not self.repo.delete(contact_id):
            raise NotFoundError("Contact", contact_id)

    def unread_count(self) -> int:
        return self.repo.count({"isRead": False})
