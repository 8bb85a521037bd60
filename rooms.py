from typing import Dict, List

from errors import NotFoundError

# Rooms available at each location
ROOMS_BY_LOCATION: Dict[str, List[str]] = {
    "New Cairo": [
        "Main Stage",
        "The Premiere Room",
        "The Briefing Room",
        "The Vision Hall",
    ],
    "Zayed": [
        "Main Stage West",
        "The Lounge Room",
    ],
}

# Inclusive person-count bounds, rooms missing here are unconstrained
ROOM_CAPACITIES: Dict[str, Dict[str, int]] = {
    "Main Stage": {"min": 10, "max": 22},
    "The Premiere Room": {"min": 6, "max": 12},
    "The Briefing Room": {"min": 2, "max": 10},
    "The Vision Hall": {"min": 2, "max": 10},
    "Main Stage West": {"min": 8, "max": 15},
    "The Lounge Room": {"min": 4, "max": 10},
}


def rooms_for(location: str) -> List[str]:
    if not location or location not in ROOMS_BY_LOCATION:
        raise NotFoundError("Location not found")
    return list(ROOMS_BY_LOCATION[location])


def capacity_for(room_name: str) -> Dict[str, int]:
    """Return {min, max} for the room, or {} when it has no limit."""
    return dict(ROOM_CAPACITIES.get(room_name, {}))
