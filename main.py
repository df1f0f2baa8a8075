from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from config.database import Database
from config.settings import configure_logging, get_settings
from services.errors import BookingError, ConflictError, NotFoundError
from routes import (
    appointment_routes,
    barber_routes,
    service_routes,
    user_routes
)
from contextlib import asynccontextmanager
import logging
import uvicorn

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await Database.connect_db(settings)
    except Exception as e:
        logger.error(f"Error during startup: {str(e)}")
        raise

    yield

    try:
        await Database.close_db()
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}")


app = FastAPI(title="Salon Booking API", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include all routers
app.include_router(user_routes.router, prefix="/api/users", tags=["users"])
app.include_router(service_routes.router, prefix="/api/services", tags=["services"])
app.include_router(barber_routes.router, prefix="/api/barbers", tags=["barbers"])
app.include_router(appointment_routes.router, prefix="/api/appointments", tags=["appointments"])


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    content = {"detail": exc.message, "error": exc.kind}
    # Tell the client what it has to re-fetch before trying again
    if isinstance(exc, ConflictError):
        content["refresh"] = "availability"
    elif isinstance(exc, NotFoundError):
        content["refresh"] = "appointments"

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=content)


@app.get("/")
def read_root():
    return {"message": "Welcome to the Salon Booking API"}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
