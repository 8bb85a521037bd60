from typing import Any, Dict, Optional
from sqlmodel import SQLModel, Field


class Database(SQLModel):
    # username -> plaintext password
    users: Dict[str, str] = Field(default_factory=dict)
    # "location_room_date" -> hourLabel -> booking details
    bookings: Dict[str, Dict[str, Dict[str, Any]]] = Field(default_factory=dict)


class UserBooking(SQLModel):
    key: str
    location: Optional[str] = None
    room: Optional[str] = None
    date: Optional[str] = None
    hourLabel: str
    details: Dict[str, Any]
