import logging
from fastapi import FastAPI

from app.core.application import APPLICATION
from app.observability.logger import init_sentry
from app.routes.appointment import router as appointment_router
from app.routes.health import router as health_router

logger = logging.getLogger("appointment_processor")
logging.basicConfig(level=logging.INFO)

init_sentry()

app = FastAPI(title=APPLICATION.display_name, description=APPLICATION.description)

# Routes
app.include_router(appointment_router, prefix="/appointment", tags=["appointment"])
app.include_router(health_router, tags=["health"])


@app.get("/")
def health():
    return {"status": "ok", "application": APPLICATION.display_name}
