from src.config.database import get_mongo_db
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from bson import ObjectId
from bson.errors import InvalidId
from datetime import datetime
from pymongo import ReturnDocument
from pymongo.collection import Collection


class MongoRepository:
    """
    Acceso genérico a una colección de Mongo.
    Los documentos salen siempre con ``_id`` como string y las referencias
    entre entidades se guardan como ids string.
    """

    def __init__(self, collection_name: str):
        self.collection_name = collection_name

    @property
    def col(self) -> Collection:
        # resolved on every access so tests can swap the database
        return get_mongo_db()[self.collection_name]

    @staticmethod
    def _stringify_id(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not doc:
            return doc
        if "_id" in doc and isinstance(doc["_id"], ObjectId):
            doc["_id"] = str(doc["_id"])
        return doc

    @staticmethod
    def to_object_id(_id: Any) -> Optional[ObjectId]:
        if isinstance(_id, ObjectId):
            return _id
        try:
            return ObjectId(str(_id))
        except (InvalidId, TypeError):
            return None

    # ===============================================================
    # 🏗️ CREATE
    # ===============================================================
    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.utcnow()
        data = dict(data)
        data.setdefault("createdAt", now)
        data.setdefault("updatedAt", now)
        res = self.col.insert_one(data)
        created = self.col.find_one({"_id": res.inserted_id})
        return self._stringify_id(created)

    # ===============================================================
    # 🔎 READ
    # ===============================================================
    def find_one(self, _id: Any, projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
        oid = self.to_object_id(_id)
        if oid is None:
            return None
        doc = self.col.find_one({"_id": oid}, projection)
        return self._stringify_id(doc) if doc else None

    def find_one_by(self, query: Dict[str, Any], projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
        doc = self.col.find_one(query, projection)
        return self._stringify_id(doc) if doc else None

    def find(
        self,
        query: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
        sort: Optional[Sequence[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        cursor = self.col.find(query, projection)
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [self._stringify_id(d) for d in cursor]

    def find_by_ids(self, ids: Iterable[Any], projection: Optional[Dict[str, int]] = None) -> Dict[str, Dict[str, Any]]:
        oids = [oid for oid in (self.to_object_id(i) for i in ids) if oid is not None]
        if not oids:
            return {}
        return {d["_id"]: d for d in self.find({"_id": {"$in": oids}}, projection)}

    def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        return self.col.count_documents(query or {})

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return list(self.col.aggregate(pipeline))

    # ===============================================================
    # ✏️ UPDATE
    # ===============================================================
    def update(self, _id: Any, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        oid = self.to_object_id(_id)
        if oid is None:
            return None
        return self.update_where({"_id": oid}, {"$set": dict(updates)})

    def update_where(
        self,
        query: Dict[str, Any],
        update: Dict[str, Any],
        upsert: bool = False,
    ) -> Optional[Dict[str, Any]]:
        """Aplica operadores de update y devuelve el documento resultante (o None)."""
        update = dict(update)
        update["$set"] = {**update.get("$set", {}), "updatedAt": datetime.utcnow()}
        doc = self.col.find_one_and_update(
            query,
            update,
            upsert=upsert,
            return_document=ReturnDocument.AFTER,
        )
        return self._stringify_id(doc) if doc else None

    # ===============================================================
    # 🗑️ DELETE
    # ===============================================================
    def delete(self, _id: Any) -> bool:
        oid = self.to_object_id(_id)
        if oid is None:
            return False
        return self.col.delete_one({"_id": oid}).deleted_count > 0
