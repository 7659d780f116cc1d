from typing import Any, Dict

from fastapi import Depends, Request

from src.services.user_service import UserService
from src.utils.errors import ForbiddenError, UnauthorizedError

user_svc = UserService()


def protect(request: Request) -> Dict[str, Any]:
    """Usuario autenticado y activo de la request; 401 en cualquier otro caso."""
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise UnauthorizedError()
    user = user_svc.user_repo.find_public(user_id)
    if not user or not user.get("isActive", True):
        raise UnauthorizedError()
    return user


def authorize(*roles: str):
    def dependency(user: Dict[str, Any] = Depends(protect)) -> Dict[str, Any]:
        if user.get("role") not in roles:
            raise ForbiddenError(f"User role {user.get('role')} is not authorized to access this route")
        return user

    return dependency


admin_only = authorize("admin")
