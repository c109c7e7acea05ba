"""Campus building prefixes in room labels ("гк 420", "улк-213", "ф 101")."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Building:
    code: str
    name: str
    address: str | None = None


BUILDINGS: dict[str, Building] = {
    "гк": Building("гк", "Главный корпус", "проспект Ленина, 40"),
    "ф": Building("ф", "Корпус ФЭТ", "ул. Вершинина, 74"),
    "мк": Building("мк", "МК"),
    "рк": Building("рк", "Радиотехнический корпус", "ул. Вершинина, 47"),
    "улк": Building("улк", "Учебно-лабораторный корпус", "ул. Красноармейская, 146"),
}

# Longest codes first; a code must not run on into a word ("физкультура")
_ROOM = re.compile(
    r"^({})(?![^\W\d_])[\s\-.,:]*(.*)$".format(
        "|".join(sorted(BUILDINGS, key=len, reverse=True))
    ),
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RoomLocation:
    building: Building | None
    room_label: str


def parse_room(room: str) -> RoomLocation:
    """Split a room label into its building and the rest.

    >>> parse_room("гк 420").room_label
    '420'
    """
    normalized = room.strip()
    match = _ROOM.match(normalized)
    if match is None:
        return RoomLocation(None, normalized)
    rest = match.group(2).strip()
    return RoomLocation(BUILDINGS[match.group(1).lower()], rest or normalized)
