from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecoware.api.routes.advisor import router as advisor_router
from ecoware.api.routes.emissions import router as emissions_router
from ecoware.api.routes.forecast import router as forecast_router
from ecoware.api.routes.simulation import router as simulation_router
from ecoware.core.activity import list_activity
from ecoware.core.config import settings
from ecoware.core.errors import SessionBusyError
from ecoware.core.logging_setup import configure_logging

configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="EcoWare warehouse emissions dashboard: activity emissions, demand forecasting and emission advice.",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(emissions_router)
app.include_router(forecast_router)
app.include_router(simulation_router)
app.include_router(advisor_router)


@app.exception_handler(SessionBusyError)
async def session_busy_handler(request: Request, exc: SessionBusyError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": exc.to_dict()})


@app.get("/health", tags=["system"])
def health() -> dict:
    return {
        "status": "ok",
        "app": settings.app_name,
        "version": settings.app_version,
        "advisor_provider": settings.advisor_provider,
    }


@app.get("/activity", tags=["system"])
def activity(limit: int = Query(default=25, ge=1, le=50)) -> dict:
    return {"events": list_activity(limit=limit)}
