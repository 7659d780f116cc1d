import logging
from typing import Optional

import redis
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from src.config import settings

_mongo_client: Optional[MongoClient] = None
_mongo_db: Optional[Database] = None
_redis_client: Optional[redis.Redis] = None


# ==================================
# 🟢 MongoDB
# ==================================
def get_mongo_db() -> Database:
    """Devuelve la base de Mongo, creando el cliente la primera vez."""
    global _mongo_client, _mongo_db
    if _mongo_db is None:
        _mongo_client = MongoClient(settings.MONGO_URI, serverSelectionTimeoutMS=5000)
        _mongo_db = _mongo_client[settings.MONGO_DATABASE]
    return _mongo_db


def set_mongo_db(db: Optional[Database]) -> None:
    """Reemplaza la base activa (tests con mongomock)."""
    global _mongo_db
    _mongo_db = db


def ensure_indexes(db: Optional[Database] = None) -> None:
    """Unique indexes backing every uniqueness rule of the domain."""
    db = db if db is not None else get_mongo_db()
    db["users"].create_index("email", unique=True)
    db["courses"].create_index("title", unique=True)
    db["enrollments"].create_index([("user", ASCENDING), ("course", ASCENDING)], unique=True)
    db["enrollments"].create_index("course")
    db["carts"].create_index("user", unique=True)
    db["feedback"].create_index([("user", ASCENDING), ("course", ASCENDING)], unique=True)
    db["reviews"].create_index([("course", ASCENDING), ("user", ASCENDING)], unique=True)


# ==================================
# ⚡ Redis
# ==================================
def get_redis_client() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.REDIS_URI, decode_responses=True)
    return _redis_client


def set_redis_client(client: Optional[redis.Redis]) -> None:
    global _redis_client
    _redis_client = client


# ==================================
# Pruebas de conexión al arrancar
# ==================================
def probar_mongo() -> bool:
    try:
        db = get_mongo_db()
        db.client.admin.command("ping")
        ensure_indexes(db)
        logging.info(f"🟢 Mongo conectado a la base: {db.name}")
        return True
    except Exception as e:
        logging.error(f"❌ Error al conectar a MongoDB: {e}")
        return False


def probar_redis() -> bool:
    try:
        get_redis_client().ping()
        logging.info("⚡ Redis conectado.")
        return True
    except Exception as e:
        logging.error(f"❌ Error al conectar a Redis: {e}")
        return False


def inicializar_conexiones() -> None:
    logging.info("--- Probando Conexiones a Bases de Datos ---")
    probar_mongo()
    probar_redis()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    inicializar_conexiones()
