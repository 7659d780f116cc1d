# src/seeds/seed_admin.py
"""
Crea el admin por defecto a partir del entorno (ADMIN_*_DEFAULT).
Si ya existe un usuario con ese email no hace nada.

    python -m src.seeds.seed_admin
"""
import logging
from typing import Any, Dict, Tuple

from src.config import settings
from src.config.database import ensure_indexes
from src.services.user_service import UserService


def seed_admin() -> Tuple[Dict[str, Any], bool]:
    if not settings.ADMIN_PASSWORD_DEFAULT:
        raise RuntimeError("ADMIN_PASSWORD_DEFAULT must be set to seed the admin user")

    svc = UserService()
    existing = svc.user_repo.find_by_email(settings.ADMIN_EMAIL_DEFAULT)
    if existing:
        logging.info(f"[seed.admin] {existing['email']} ya existe, se omite")
        return existing, False

    admin = svc.register(
        {
            "fullName": settings.ADMIN_FULLNAME_DEFAULT,
            "email": settings.ADMIN_EMAIL_DEFAULT,
            "phone": settings.ADMIN_PHONE_DEFAULT,
            "password": settings.ADMIN_PASSWORD_DEFAULT,
        },
        role="admin",
    )
    admin = svc.admin_update(admin["_id"], {"isVerified": True})
    logging.info(f"✅ Admin creado: {admin['email']} (cambiar la contraseña tras el primer login)")
    return admin, True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    ensure_indexes()
    seed_admin()
