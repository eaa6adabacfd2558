from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
import logging
import os
from dotenv import load_dotenv

# Load .env variables
load_dotenv()

# Configure base logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("salones")

from salones.routers import auth, reservas, salones, servicios, turnos
from salones.database import SessionLocal, engine, Base, get_db
from salones.exceptions import ReservaError
from salones.init_db import create_initial_admin
import uvicorn

IS_DEVELOPMENT = os.getenv("ENVIRONMENT", "production").lower() == "development"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Las tablas las crea Alembic; create_all solo cubre bases vacías de desarrollo
    if IS_DEVELOPMENT:
        Base.metadata.create_all(bind=engine)

    logger.info("Initializing database with administrator...")
    db = SessionLocal()
    try:
        create_initial_admin(db)
    finally:
        db.close()
    yield


app = FastAPI(
    title="Salones API",
    description="API para la reserva de salones de fiesta por fecha y turno",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/auth", tags=["authentication"])
app.include_router(reservas.router, prefix="/reservations", tags=["reservations"])
app.include_router(salones.router, prefix="/salones", tags=["salones"])
app.include_router(turnos.router, prefix="/turnos", tags=["turnos"])
app.include_router(servicios.router, prefix="/servicios", tags=["servicios"])


@app.get("/")
def read_root():
    return {"message": "Welcome to Salones API"}


@app.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok"}


def _request_context(request: Request) -> str:
    return "path=%s | method=%s | client=%s" % (
        request.url.path,
        request.method,
        request.client.host if request.client else "unknown",
    )


@app.exception_handler(ReservaError)
async def reserva_error_handler(request: Request, exc: ReservaError):
    content = {"status": "error", "message": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.detail, "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"][1:]) or None,
            "message": error["msg"],
            "location": error["loc"][0] if error["loc"] else None,
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "status": "error",
            "message": "Errores de validación en los datos enviados",
            "errors": errors,
        },
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error | %s | %s", _request_context(request), exc.orig)
    return JSONResponse(
        status_code=409,
        content={
            "status": "error",
            "message": "Ya existe un registro con estos datos",
        },
    )


@app.exception_handler(OperationalError)
@app.exception_handler(DBAPIError)
async def database_error_handler(request: Request, exc: DBAPIError):
    logger.exception("Database error | %s", _request_context(request))
    content = {
        "status": "error",
        "message": "Error de conexión con la base de datos",
    }
    if IS_DEVELOPMENT:
        content["detail"] = str(exc)
    return JSONResponse(status_code=503, content=content)


# Global unhandled exception handler -> logs ERROR
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error | %s", _request_context(request))
    content = {"status": "error", "message": "Error interno del servidor"}
    if IS_DEVELOPMENT:
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)


if __name__ == "__main__":
    uvicorn.run("salones.main:app", host="0.0.0.0", port=5009, reload=True)
