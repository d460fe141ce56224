from datetime import timedelta
from typing import get_args

from fitledger.models import SleepQuality

from conftest import WORKOUT, auth, register


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_requests_without_user_are_rejected(client):
    assert (await client.get("/api/workouts")).status_code == 401
    resp = await client.get("/api/workouts", headers={"X-User-Id": "nobody"})
    assert resp.status_code == 401


async def test_register_and_read_user(client):
    user = await register(client, "sam", currentWeight=80.5, fitnessGoals=["endurance"])

    assert user["currentStreak"] == 0
    assert user["longestStreak"] == 0
    assert user["fitnessGoals"] == ["endurance"]

    resp = await client.get("/api/user", headers=auth(user))
    assert resp.status_code == 200
    assert resp.json()["username"] == "sam"


async def test_register_duplicate_username(client):
    await register(client, "sam")
    resp = await client.post("/api/users", json={
        "username": "sam", "email": "other@example.com",
        "firstName": "S", "lastName": "T",
    })
    assert resp.status_code == 409


async def test_workout_crud(client):
    user = await register(client)
    headers = auth(user)

    created = await client.post("/api/workouts", json={**WORKOUT, "notes": "easy"}, headers=headers)
    assert created.status_code == 201, created.text
    workout = created.json()
    assert workout["userId"] == user["id"]
    assert workout["notes"] == "easy"
    assert isinstance(workout["createdAt"], int)

    fetched = await client.get(f"/api/workouts/{workout['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json() == workout

    edited = await client.patch(
        f"/api/workouts/{workout['id']}", json={"duration": 45}, headers=headers
    )
    assert edited.status_code == 200
    assert edited.json()["duration"] == 45
    assert edited.json()["name"] == WORKOUT["name"]

    deleted = await client.delete(f"/api/workouts/{workout['id']}", headers=headers)
    assert deleted.status_code == 204

    missing = await client.get(f"/api/workouts/{workout['id']}", headers=headers)
    assert missing.status_code == 404


async def test_invalid_workout_is_rejected_without_a_record(client):
    user = await register(client)
    headers = auth(user)

    resp = await client.post("/api/workouts", json={**WORKOUT, "duration": 0}, headers=headers)
    assert resp.status_code == 422

    resp = await client.post("/api/workouts", json={"name": "No type"}, headers=headers)
    assert resp.status_code == 422

    assert (await client.get("/api/workouts", headers=headers)).json() == []


async def test_other_users_workout_is_404(client):
    owner = await register(client, "owner")
    intruder = await register(client, "intruder")
    workout = (await client.post("/api/workouts", json=WORKOUT, headers=auth(owner))).json()

    for method in ("get", "delete"):
        resp = await getattr(client, method)(
            f"/api/workouts/{workout['id']}", headers=auth(intruder)
        )
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Workout not found"}

    assert (await client.get("/api/workouts", headers=auth(intruder))).json() == []


async def test_streak_scenario(client, clock):
    user = await register(client)
    headers = auth(user)
    today = clock.now

    for days in (2, 1, 0):
        clock.now = today - timedelta(days=days)
        resp = await client.post("/api/workouts", json=WORKOUT, headers=headers)
        assert resp.status_code == 201

    stats = (await client.get("/api/dashboard/stats", headers=headers)).json()
    assert stats["currentStreak"] == 3
    assert stats["longestStreak"] == 3
    assert stats["weeklyWorkouts"] == 3
    assert stats["totalWorkouts"] == 3


async def test_same_day_workouts_count_once(client):
    user = await register(client)
    headers = auth(user)

    for _ in range(2):
        await client.post("/api/workouts", json=WORKOUT, headers=headers)

    me = (await client.get("/api/user", headers=headers)).json()
    assert me["currentStreak"] == 1
    assert me["longestStreak"] == 1


async def test_weight_progress_scenario(client, clock):
    user = await register(client, currentWeight=180, targetWeight=170)
    headers = auth(user)

    await client.post("/api/health-metrics", json={"weight": 178}, headers=headers)
    clock.advance(days=3)
    await client.post("/api/health-metrics", json={"weight": 175}, headers=headers)

    stats = (await client.get("/api/dashboard/stats", headers=headers)).json()
    assert stats["weightProgress"] == -3.0
    assert stats["currentWeight"] == 175
    assert stats["targetWeight"] == 170


async def test_dashboard_idempotent(client):
    user = await register(client, currentWeight=90)
    headers = auth(user)
    await client.post("/api/workouts", json=WORKOUT, headers=headers)
    await client.post("/api/health-metrics", json={"weight": 89.4}, headers=headers)

    first = (await client.get("/api/dashboard/stats", headers=headers)).json()
    second = (await client.get("/api/dashboard/stats", headers=headers)).json()

    assert first == second
    assert first["weightProgress"] == 0


async def test_health_metrics_endpoints(client, clock):
    user = await register(client)
    headers = auth(user)

    latest = await client.get("/api/health-metrics/latest", headers=headers)
    assert latest.status_code == 200
    assert latest.json() is None

    first = await client.post(
        "/api/health-metrics",
        json={"sleepHours": 7, "sleepQuality": "good", "waterIntake": 8},
        headers=headers,
    )
    assert first.status_code == 201, first.text
    assert first.json()["weight"] is None

    clock.advance(hours=5)
    await client.post("/api/health-metrics", json={"weight": 72.3}, headers=headers)

    listed = (await client.get("/api/health-metrics", headers=headers)).json()
    assert [m["weight"] for m in listed] == [72.3, None]

    latest = (await client.get("/api/health-metrics/latest", headers=headers)).json()
    assert latest["weight"] == 72.3

    bad = await client.post(
        "/api/health-metrics", json={"sleepQuality": "amazing"}, headers=headers
    )
    assert bad.status_code == 422


async def test_scheduled_workouts_endpoints(client, clock):
    user = await register(client)
    headers = auth(user)

    for days, name in ((4, "Intervals"), (1, "Recovery")):
        resp = await client.post("/api/scheduled-workouts", json={
            "name": name,
            "type": "Cardio",
            "scheduledDate": (clock.now + timedelta(days=days)).isoformat(),
            "duration": 40,
        }, headers=headers)
        assert resp.status_code == 201, resp.text
        assert resp.json()["completed"] is False

    listed = (await client.get("/api/scheduled-workouts", headers=headers)).json()
    assert [s["name"] for s in listed] == ["Recovery", "Intervals"]

    target = listed[0]["id"]
    patched = await client.patch(
        f"/api/scheduled-workouts/{target}", json={"completed": True}, headers=headers
    )
    assert patched.status_code == 200
    assert patched.json()["completed"] is True
    assert patched.json()["name"] == "Recovery"

    intruder = await register(client, "intruder")
    resp = await client.delete(f"/api/scheduled-workouts/{target}", headers=auth(intruder))
    assert resp.status_code == 404

    resp = await client.delete(f"/api/scheduled-workouts/{target}", headers=headers)
    assert resp.status_code == 204
    assert len((await client.get("/api/scheduled-workouts", headers=headers)).json()) == 1


async def test_profile_update_ignores_streak_fields(client):
    user = await register(client, currentWeight=80)
    headers = auth(user)
    await client.post("/api/workouts", json=WORKOUT, headers=headers)

    resp = await client.patch("/api/user/profile", json={
        "targetWeight": 75,
        "currentStreak": 50,
        "longestStreak": 50,
    }, headers=headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["targetWeight"] == 75
    assert body["currentWeight"] == 80
    assert body["currentStreak"] == 1
    assert body["longestStreak"] == 1


async def test_delete_keeps_streak(client):
    user = await register(client)
    headers = auth(user)
    workout = (await client.post("/api/workouts", json=WORKOUT, headers=headers)).json()

    await client.delete(f"/api/workouts/{workout['id']}", headers=headers)

    stats = (await client.get("/api/dashboard/stats", headers=headers)).json()
    assert stats["currentStreak"] == 1
    assert stats["totalWorkouts"] == 0


async def test_every_sleep_quality_is_accepted(client):
    user = await register(client)
    headers = auth(user)

    for quality in get_args(SleepQuality):
        resp = await client.post(
            "/api/health-metrics", json={"sleepQuality": quality}, headers=headers
        )
        assert resp.status_code == 201, resp.text
        assert resp.json()["sleepQuality"] == quality
