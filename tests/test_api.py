import pytest
from fastapi.testclient import TestClient

from timetable_engine.main import app


@pytest.fixture
def client():
    return TestClient(app)


def _generate(client, example_data, **extra):
    response = client.post("/generate", json={"snapshot": example_data, "seed": 11, **extra})
    assert response.status_code == 200
    return response.json()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Timetable Engine API"}


def test_example_endpoint(client, example_data):
    response = client.get("/example")
    assert response.status_code == 200
    assert response.json() == example_data


def test_generate(client, example_data):
    body = _generate(client, example_data)
    assert body["entries"]
    assert body["conflicts"] == []
    assert body["strategy"] == "cp-sat"
    first = body["entries"][0]
    assert {"subjectId", "teacherName", "roomName", "day", "slotNo", "time", "sessionType"} <= set(first)


def test_generate_returns_schedule_report(client, example_data):
    body = _generate(client, example_data)
    report = body["report"]
    assert report["totalEntries"] == len(body["entries"])
    assert set(report["dayCounts"]) == {"Mon", "Tue", "Wed", "Thu", "Fri"}
    assert sum(report["dayCounts"].values()) == len(body["entries"])
    assert len(report["coverage"]) == len(example_data["subjects"])
    assert report["conflicts"] == []
    assert report["valid"] == (body["failures"] == [])


def test_generate_with_random_strategy(client, example_data):
    body = _generate(client, example_data, strategy="random")
    assert body["strategy"] == "random"
    assert body["conflicts"] == []


def test_generate_rejects_bad_snapshot(client):
    response = client.post("/generate", json={"snapshot": {"timeslots": [{"day": "Sun"}]}})
    assert response.status_code == 422


def test_parse(client):
    response = client.post("/parse", json={"text": "swap period 1 and 2 on Monday"})
    assert response.status_code == 200
    body = response.json()
    assert body["understood"] is True
    assert body["command"] == {"action": "swap", "day": "Mon", "slotA": 1, "slotB": 2, "otherDay": None}
    assert body["description"] == "swap Mon period 1 with Mon period 2"


def test_parse_not_understood(client):
    body = client.post("/parse", json={"text": "make it nicer"}).json()
    assert body == {"understood": False, "command": None, "description": None}


def test_command_applies_to_schedule(client, example_data):
    schedule = _generate(client, example_data)["entries"]
    target = schedule[0]
    text = f"clear period {target['slotNo']} on {target['day']}"
    response = client.post("/command", json={"text": text, "schedule": schedule, "snapshot": example_data})
    assert response.status_code == 200
    body = response.json()
    assert body["understood"] is True
    assert body["error"] is None
    assert body["command"]["action"] == "clear_slot"
    assert not any(
        e["day"] == target["day"] and e["slotNo"] == target["slotNo"] for e in body["schedule"]
    )


def test_command_error_leaves_schedule(client, example_data):
    schedule = _generate(client, example_data)["entries"]
    response = client.post(
        "/command",
        json={"text": "clear period 9 on Monday", "schedule": schedule, "snapshot": example_data},
    )
    body = response.json()
    assert body["understood"] is True
    assert body["error"].startswith("invalid slot reference")
    assert body["schedule"] == schedule


def test_command_not_understood(client, example_data):
    response = client.post(
        "/command",
        json={"text": "make it nicer", "schedule": [], "snapshot": example_data},
    )
    body = response.json()
    assert body["understood"] is False
    assert body["schedule"] == []


def test_command_regenerate(client, example_data):
    response = client.post(
        "/command",
        json={"text": "regenerate the timetable", "schedule": [], "snapshot": example_data},
    )
    body = response.json()
    assert body["understood"] is True
    assert body["schedule"]
