import logging
import os
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from roomly import config
from roomly.db import engine, Base
from roomly.errors import RoomlyError

from roomly.models.community import Community
from roomly.models.user import User
from roomly.models.amenity import Amenity
from roomly.models.reservation import Reservation
from roomly.models.point_log import PointLog
from roomly.models.post import Post, Comment, Like
from roomly.models.join_request import JoinRequest

from roomly.routes.users import router as users_router
from roomly.routes.communities import router as communities_router
from roomly.routes.amenities import router as amenities_router
from roomly.routes.reservations import router as reservations_router
from roomly.routes.points import router as points_router
from roomly.routes.feed import router as feed_router
from roomly.routes.admin import router as admin_router


logger = logging.getLogger(__name__)

app = FastAPI(title="Roomly")

# ─── CORS ─────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RoomlyError)
def handle_roomly_error(request: Request, exc: RoomlyError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
def handle_store_error(request: Request, exc: SQLAlchemyError):
    logger.exception("store failure", extra={"path": request.url.path})
    return JSONResponse(status_code=503, content={"detail": "Store failure"})


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)


app.include_router(users_router)
app.include_router(communities_router)
app.include_router(amenities_router)
app.include_router(reservations_router)
app.include_router(points_router)
app.include_router(feed_router)
app.include_router(admin_router)

# ─── Local uploads ───────────────────────────────────────────────
if config.STORAGE_BACKEND == "local":
    os.makedirs(config.STORAGE_ROOT, exist_ok=True)
    app.mount(
        urlparse(config.STORAGE_PUBLIC_URL).path or "/uploads",
        StaticFiles(directory=config.STORAGE_ROOT),
        name="uploads",
    )


@app.get("/")
def read_root():
    return {"message": "Roomly is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8001, reload=True)
