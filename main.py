import os
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

import crud
import rooms
from database import BaseStore, init_db, get_store
from errors import BookingServiceError
from models import UserBooking

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Meeting Room Booking Service")


# Pydantic Schemas for Request bodies.
# Every field is optional here; missing values are reported by crud as 400.
class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Credentials(_Body):
    username: Optional[str] = None
    password: Optional[str] = None


class BookingCreate(_Body):
    key: Optional[str] = None
    room_name: Optional[str] = Field(None, alias="roomName")
    hour_label: Optional[str] = Field(None, alias="hourLabel")
    details: Optional[Dict[str, Any]] = None


class BookingUpdate(_Body):
    old_key: Optional[str] = Field(None, alias="oldKey")
    old_hour_label: Optional[str] = Field(None, alias="oldHourLabel")
    new_key: Optional[str] = Field(None, alias="newKey")
    new_room_name: Optional[str] = Field(None, alias="newRoomName")
    new_hour_label: Optional[str] = Field(None, alias="newHourLabel")
    new_details: Optional[Dict[str, Any]] = Field(None, alias="newDetails")
    username: Optional[str] = None


class BookingCancel(_Body):
    key: Optional[str] = None
    hour_label: Optional[str] = Field(None, alias="hourLabel")
    username: Optional[str] = None


@app.on_event("startup")
async def on_startup():
    init_db()


@app.exception_handler(BookingServiceError)
async def booking_error_handler(request: Request, exc: BookingServiceError):
    logger.info(
        "%s %s rejected: %s (%s)",
        request.method, request.url.path, exc.message, type(exc).__name__,
    )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are reported like missing fields, not as 422
    errors = exc.errors()
    where = ".".join(str(p) for p in errors[0]["loc"]) if errors else "body"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": f"Invalid request data at {where}."},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


# --- Auth ---
@app.post("/api/signup", status_code=status.HTTP_201_CREATED)
def signup(body: Credentials, store: BaseStore = Depends(get_store)):
    crud.signup(store, body.username, body.password)
    return {"message": "Sign up successful."}


@app.post("/api/login")
def login(body: Credentials, store: BaseStore = Depends(get_store)):
    # No session is issued; later calls pass the username again
    username = crud.login(store, body.username, body.password)
    return {"message": "Login successful.", "username": username}


# --- Room Catalog ---
@app.get("/api/rooms", response_model=List[str])
def list_rooms(location: Optional[str] = None):
    return rooms.rooms_for(location)


@app.get("/api/room-capacity")
def room_capacity(room_name: Optional[str] = Query(None, alias="roomName")):
    return rooms.capacity_for(room_name)


# --- Bookings ---
@app.get("/api/bookings")
def list_bookings(key: Optional[str] = None, store: BaseStore = Depends(get_store)):
    return crud.list_bookings(store, key)


@app.post("/api/bookings", status_code=status.HTTP_201_CREATED)
def create_booking(body: BookingCreate, store: BaseStore = Depends(get_store)):
    crud.create_booking(store, body.key, body.room_name, body.hour_label, body.details)
    return {"message": "Booking successful."}


@app.put("/api/bookings")
def update_booking(body: BookingUpdate, store: BaseStore = Depends(get_store)):
    crud.update_booking(
        store,
        old_key=body.old_key,
        old_hour_label=body.old_hour_label,
        new_key=body.new_key,
        new_room_name=body.new_room_name,
        new_hour_label=body.new_hour_label,
        new_details=body.new_details,
        username=body.username,
    )
    return {"message": "Booking updated successfully."}


@app.delete("/api/bookings")
def cancel_booking(body: BookingCancel, store: BaseStore = Depends(get_store)):
    crud.cancel_booking(store, body.key, body.hour_label, body.username)
    return {"message": "Booking cancelled."}


@app.get("/api/user-bookings", response_model=List[UserBooking])
def user_bookings(username: Optional[str] = None, store: BaseStore = Depends(get_store)):
    return crud.list_for_user(store, username)


app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
    )
