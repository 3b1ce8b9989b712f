import logging

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from core.database import engine, Base, SessionLocal
from services.auth_service import AuthService
from services.config_service import get_log_level

# Import all models to register them
from models.user import User
from models.booking import BookingEntry
from models.completed_file import CompletedFile
from models.master_data import MasterList
from models.local_charges import LocalChargeGrid
from models.booking_request import BookingRequest

# Import routers
from api import (
    admin,
    auth,
    booking_requests,
    completed_files,
    dashboard,
    email,
    entries,
    local_charges,
    master_data,
)

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="DMS Booking Desk",
    description="Booking, documentation checklist and completed files for the freight desk",
    version="1.0.0"
)

# Register routers
app.include_router(auth.router)
app.include_router(admin.router, prefix="/api")
app.include_router(entries.router, prefix="/api")
app.include_router(completed_files.router, prefix="/api")
app.include_router(master_data.router, prefix="/api")
app.include_router(local_charges.router, prefix="/api")
app.include_router(booking_requests.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(email.router, prefix="/api")


@app.on_event("startup")
def prepare_database() -> None:
    db = None
    try:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        AuthService.ensure_default_admin(db)
    except SQLAlchemyError as exc:
        log.error("Database bootstrap failed: %s", exc, exc_info=True)
    finally:
        if db:
            db.close()


# ==================== HEALTH CHECK ====================
@app.get("/health")
def health_check():
    """Health check endpoint for Docker and Kubernetes."""
    return {
        "status": "healthy",
        "service": "DMS Booking Desk",
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
