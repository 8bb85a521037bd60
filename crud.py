import re
import math
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from database import BaseStore
from errors import (
    AccountExistsError,
    AuthError,
    CapacityError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from rooms import capacity_for

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "_"


def make_key(location: str, room: str, booking_date: str) -> str:
    return KEY_SEPARATOR.join([location, room, booking_date])


def split_key(key: str) -> List[Optional[str]]:
    # Lossy when a name contains "_": only the first three parts are used
    parts = key.split(KEY_SEPARATOR)
    return (parts + [None, None, None])[:3]


# --- Auth ---

def signup(store: BaseStore, username: str, password: str):
    if not username or not password:
        raise ValidationError("Please fill in all fields.")

    db = store.load()
    if username in db.users:
        raise AccountExistsError("User already exists.")

    db.users[username] = password  # stored as-is, there is no hashing
    store.save(db)
    logger.info("User %s signed up", username)


def login(store: BaseStore, username: str, password: str) -> str:
    db = store.load()
    stored = db.users.get(username) if username else None
    if stored is None or stored != password:
        raise AuthError("Incorrect username or password.")
    return username


# --- Bookings ---

def _parse_persons(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    match = re.match(r"\s*([+-]?\d+)", str(value)) if value is not None else None
    return int(match.group(1)) if match else None


def check_capacity(room_name: str, details: Dict[str, Any]):
    capacity = capacity_for(room_name)
    if not capacity:
        return
    persons = _parse_persons(details.get("persons"))
    if persons is None or persons < capacity["min"] or persons > capacity["max"]:
        raise CapacityError(
            f"Number of persons must be between {capacity['min']} and "
            f"{capacity['max']} for this room."
        )


def list_bookings(store: BaseStore, key: str) -> Dict[str, Dict[str, Any]]:
    if not key:
        raise ValidationError("Booking key is required.")
    db = store.load()
    return db.bookings.get(key, {})


def create_booking(
    store: BaseStore,
    key: str,
    room_name: str,
    hour_label: str,
    details: Optional[Dict[str, Any]],
):
    if not key or not room_name or not hour_label or details is None:
        raise ValidationError("Missing booking information.")

    check_capacity(room_name, details)

    db = store.load()
    room_bookings = db.bookings.setdefault(key, {})
    if hour_label in room_bookings:
        raise ConflictError("Slot already booked!")

    room_bookings[hour_label] = details
    store.save(db)
    logger.info("Booked %s at %s for %s", key, hour_label, details.get("presenter"))


def update_booking(
    store: BaseStore,
    old_key: str,
    old_hour_label: str,
    new_key: str,
    new_room_name: str,
    new_hour_label: str,
    new_details: Optional[Dict[str, Any]],
    username: str,
):
    """Move a booking to new coordinates and/or replace its details.

    The move is applied to the loaded document and written back once, so a
    failure before the write leaves the stored booking where it was.
    """
    if (
        not old_key
        or not old_hour_label
        or not new_key
        or not new_room_name
        or not new_hour_label
        or new_details is None
        or not username
    ):
        raise ValidationError("Missing update information.")

    db = store.load()
    old_booking = db.bookings.get(old_key, {}).get(old_hour_label)

    # 1. The acting user must own the original booking
    if old_booking is None:
        raise NotFoundError("Original booking not found.")
    if old_booking.get("presenter") != username:
        raise ForbiddenError("You can only edit your own bookings.")

    # 2. The new details must fit the new room
    check_capacity(new_room_name, new_details)

    # 3. The new slot must be free unless it is the same slot
    same_slot = old_key == new_key and old_hour_label == new_hour_label
    if not same_slot and new_hour_label in db.bookings.get(new_key, {}):
        raise ConflictError("The new time slot is already booked.")

    # 4. Delete old, insert new
    del db.bookings[old_key][old_hour_label]
    if not db.bookings[old_key]:
        del db.bookings[old_key]
    db.bookings.setdefault(new_key, {})[new_hour_label] = new_details
    store.save(db)
    logger.info(
        "%s moved booking %s %s -> %s %s",
        username, old_key, old_hour_label, new_key, new_hour_label,
    )


def cancel_booking(store: BaseStore, key: str, hour_label: str, username: str):
    if not key or not hour_label or not username:
        raise ValidationError("Missing cancellation information.")

    db = store.load()
    booking = db.bookings.get(key, {}).get(hour_label)
    if booking is None:
        raise NotFoundError("Booking not found.")
    if booking.get("presenter") != username:
        raise ForbiddenError("Only the user who booked this slot can cancel it.")

    # An emptied day bucket is left in place
    del db.bookings[key][hour_label]
    store.save(db)
    logger.info("%s cancelled %s at %s", username, key, hour_label)


def _date_sort_key(booking_date: Optional[str]):
    try:
        return (0, date.fromisoformat(booking_date))
    except (TypeError, ValueError):
        return (1, date.min)


def list_for_user(store: BaseStore, username: str) -> List[Dict[str, Any]]:
    if not username:
        raise ValidationError("Username is required.")

    db = store.load()
    user_bookings = []
    for key, room_bookings in db.bookings.items():
        location, room, booking_date = split_key(key)
        for hour_label, details in room_bookings.items():
            if details.get("presenter") == username:
                user_bookings.append({
                    "key": key,
                    "location": location,
                    "room": room,
                    "date": booking_date,
                    "hourLabel": hour_label,
                    "details": details,
                })

    # Soonest first; sorted() is stable so same-day entries keep scan order
    return sorted(user_bookings, key=lambda b: _date_sort_key(b["date"]))
