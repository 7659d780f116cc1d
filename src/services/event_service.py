# src/services/event_service.py
from typing import Any, Dict, List
import logging

from src.repositories.mongo_repository import MongoRepository
from src.utils.errors import ConflictError, InvalidStateError, NotFoundError
from src.utils.query_engine import QueryResult, run_query

ACTIVE = {"isActive": True}


class EventService:
    def __init__(self):
        self.repo = MongoRepository("events")

    # ===============================================================
    # 📋 LIST / GET
    # ===============================================================
    def list(self, params) -> QueryResult:
        return run_query(self.repo, params, base_filter=ACTIVE, default_sort=(("eventDate", 1),))

    def get(self, event_id: str, active_only: bool = True) -> Dict[str, Any]:
        event = self.repo.find_one(event_id)
        if not event or (active_only and not event.get("isActive")):
            raise NotFoundError("Event", event_id)
        return event

    def my_events(self, user_id: str) -> List[Dict[str, Any]]:
        return self.repo.find({"registeredUsers": user_id}, sort=[("eventDate", 1)])

    # ===============================================================
    # 🏗️ CRUD (admin)
    # ===============================================================
    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        event = {**payload, "registeredUsers": []}
        created = self.repo.create(event)
        logging.info(f"[events.create] {created['_id']} '{created['title']}'")
        return created

    def update(self, event_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        event = self.get(event_id, active_only=False)
        if not changes:
            return event
        return self.repo.update(event_id, changes)

    def delete(self, event_id: str) -> None:
        if not self.repo.delete(event_id):
            raise NotFoundError("Event", event_id)

    # ===============================================================
    # 🎟️ REGISTRO
    # ===============================================================
    def register(self, event_id: str, user_id: str) -> Dict[str, Any]:
        """
        Una sola escritura condicional: activo, con lugar y sin el usuario ya
        registrado. Si no matchea, se diagnostica el motivo.
        """
        oid = self.repo.to_object_id(event_id)
        if oid is not None:
            updated = self.repo.update_where(
                {
                    "_id": oid,
                    "isActive": True,
                    "seatsAvailable": {"$gt": 0},
                    "registeredUsers": {"$ne": user_id},
                },
                {"$push": {"registeredUsers": user_id}, "$inc": {"seatsAvailable": -1}},
            )
            if updated:
                logging.info(f"[events.register] user={user_id} event={event_id}")
                return updated

        event = self.get(event_id)
        if user_id in (event.get("registeredUsers") or []):
            raise ConflictError("User is already registered for this event")
        raise InvalidStateError("No seats available for this event")
