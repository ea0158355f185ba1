import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cashdrawer import __version__
from cashdrawer.config import settings
from cashdrawer.database import engine
from cashdrawer.exceptions import CashDrawerError, InternalError
from cashdrawer.logging_config import configure_logging
from cashdrawer.models import Base
from cashdrawer.routers import cash, settings as settings_router

logger = logging.getLogger(__name__)


def create_app(create_tables: bool = True) -> FastAPI:
    configure_logging()

    # 1. CREACIÓN AUTOMÁTICA DE TABLAS
    if create_tables:
        Base.metadata.create_all(bind=engine)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Control de caja: apertura, bloqueo, arqueo y aprobación de diferencias",
        version=__version__,
    )

    # 2. CONFIGURACIÓN DE CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 3. REGISTRO DE ROUTERS
    app.include_router(cash.router, prefix="/api/cash", tags=["💰 Control de Caja (Turnos)"])
    app.include_router(settings_router.router, prefix="/api/settings", tags=["🔐 PIN de validación"])

    # 4. MANEJO DE ERRORES
    @app.exception_handler(CashDrawerError)
    async def cash_drawer_error_handler(request: Request, exc: CashDrawerError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Errores de formato en el cuerpo: 400 con el campo que falló
        errors = [
            {"field": ".".join(str(p) for p in err["loc"] if p != "body"), "message": err["msg"]}
            for err in exc.errors()
        ]
        first = errors[0] if errors else {"field": None, "message": "Datos inválidos"}
        return JSONResponse(
            status_code=400,
            content={
                "detail": first["message"],
                "code": "validation",
                "field": first["field"],
                "errors": errors,
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Error de base de datos en %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=InternalError().to_dict())

    @app.get("/api/health", tags=["Salud"])
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
