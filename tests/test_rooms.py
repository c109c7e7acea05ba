import pytest

from tusur_timetable.rooms import BUILDINGS, parse_room


@pytest.mark.parametrize(
    "room, code, label",
    [
        ("гк 420", "гк", "420"),
        ("ГК-420", "гк", "420"),
        ("улк 213", "улк", "213"),
        ("ф 101", "ф", "101"),
        ("рк.5", "рк", "5"),
    ],
)
def test_parse_room_known_buildings(room, code, label):
    location = parse_room(room)
    assert location.building is BUILDINGS[code]
    assert location.room_label == label


@pytest.mark.parametrize("room", [" спорткомплекс ", "физкультура"])
def test_parse_room_unknown_building(room):
    location = parse_room(room)
    assert location.building is None
    assert location.room_label == room.strip()


def test_parse_room_code_only_keeps_text():
    location = parse_room("гк")
    assert location.building is BUILDINGS["гк"]
    assert location.room_label == "гк"
