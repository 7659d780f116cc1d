# main.py (raíz)
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
import uvicorn

from src.config import settings
from src.config.database import inicializar_conexiones
from src.api.middleware.session_middleware import session_middleware
from src.api.routes.auth_routes import router as auth_router
from src.api.routes.user_routes import router as user_router
from src.api.routes.course_routes import router as course_router
from src.api.routes.enrollment_routes import router as enrollment_router
from src.api.routes.cart_routes import router as cart_router
from src.api.routes.event_routes import router as event_router
from src.api.routes.feedback_routes import router as feedback_router
from src.api.routes.contact_routes import router as contact_router
from src.api.routes.admin_routes import router as admin_router
from src.utils.errors import ApiError

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    inicializar_conexiones()
    yield


app = FastAPI(title="CourseHub API", version="1.0.0",
              description="Marketplace de cursos online: cursos, inscripciones, carrito y eventos.",
              lifespan=lifespan)

# Registrar middleware de sesión (lee Bearer / X-Session-Id y resuelve userId en Redis)
app.middleware("http")(session_middleware)


# ==================================
# ❌ Manejo de errores
# ==================================
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err["loc"] if p != "body"), "msg": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"success": False, "error": "Validation failed", "details": details})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logging.exception(f"❌ Error no manejado en {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "error": "Server Error"})


@app.get("/", tags=["Health"])
async def root():
    return {"success": True, "message": "✅ CourseHub API is up and running."}


app.include_router(auth_router, prefix="/api/v1")
app.include_router(user_router, prefix="/api/v1")
app.include_router(course_router, prefix="/api/v1")
app.include_router(enrollment_router, prefix="/api/v1")
app.include_router(cart_router, prefix="/api/v1")
app.include_router(event_router, prefix="/api/v1")
app.include_router(feedback_router, prefix="/api/v1")
app.include_router(contact_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
