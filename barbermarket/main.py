# barbermarket/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from barbermarket.config import settings
from barbermarket.db import init_db
from barbermarket.logger import logger, setup_logging
from barbermarket.routers import (
    auth_routes,
    availability_routes,
    barbers_routes,
    bookings_routes,
    portfolio_routes,
    reviews_routes,
    users_routes,
)

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Starting {}", settings.PROJECT_NAME)
    yield
    logger.info("Shutting down {}", settings.PROJECT_NAME)


app = FastAPI(title=settings.PROJECT_NAME, version="0.1.0", lifespan=lifespan)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


app.include_router(auth_routes.router)
app.include_router(users_routes.router)
# /barbers/me/... must be registered before /barbers/{barber_id}
app.include_router(availability_routes.router)
app.include_router(portfolio_routes.router)
app.include_router(barbers_routes.router)
app.include_router(bookings_routes.router)
app.include_router(reviews_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("barbermarket.main:app", host="0.0.0.0", port=8000, reload=True)
