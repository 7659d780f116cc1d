from fastapi import Request
import logging

from redis.exceptions import RedisError

from src.repositories.session_repository import SessionRepository

sessions = SessionRepository()


def extract_token(request: Request):
	"""Token de sesión: Authorization: Bearer <token> o X-Session-Id."""
	auth_header = request.headers.get("authorization")
	if auth_header and auth_header.lower().startswith("bearer "):
		return auth_header.split(" ", 1)[1].strip() or None
	return request.headers.get("x-session-id")


async def session_middleware(request: Request, call_next):
	"""
	Middleware HTTP que resuelve la sesión antes de procesar la request.
	- Lee el token (Bearer o X-Session-Id) y lo resuelve en Redis
	- Deja request.state.token y request.state.user_id (None si no hay sesión)
	- Nunca rechaza: las rutas protegidas lo hacen vía la dependencia protect
	"""

	request.state.user_id = None
	request.state.token = extract_token(request)

	if request.state.token:
		try:
			request.state.user_id = sessions.resolve(request.state.token)
		except RedisError as e:
			logging.error(f"Error connecting to Redis in middleware: {e}")

	return await call_next(request)
