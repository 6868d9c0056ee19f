"""
HTTP surface: auth flow, class flow and error mapping.
"""


def _sign_up_and_in(client, login: str) -> dict:
    r = client.put("/api/auth/signUp", json={"login": login, "password": "password1"})
    assert r.status_code == 200, r.text
    r = client.post("/api/auth/signIn", json={"login": login, "password": "password1"})
    assert r.status_code == 200, r.text
    return r.json()


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_duplicate_sign_up_is_409(client):
    _sign_up_and_in(client, "carol")
    r = client.put("/api/auth/signUp", json={"login": "carol", "password": "password1"})
    assert r.status_code == 409
    assert r.json()["kind"] == "Conflict"


def test_bad_credentials_are_401(client):
    _sign_up_and_in(client, "carol")
    r = client.post("/api/auth/signIn", json={"login": "carol", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json()["kind"] == "Unauthorized"


def test_missing_token_is_401(client):
    r = client.get("/api/classes")
    assert r.status_code == 401
    assert r.headers.get("WWW-Authenticate") == "Bearer"


def test_refresh_rotation_over_http(client):
    tokens = _sign_up_and_in(client, "dave")

    r = client.get("/api/auth/refresh", headers=_bearer(tokens["refreshToken"]))
    assert r.status_code == 200
    rotated = r.json()
    assert rotated["refreshToken"] != tokens["refreshToken"]

    replay = client.get("/api/auth/refresh", headers=_bearer(tokens["refreshToken"]))
    assert replay.status_code == 401

    # an access token is not accepted as a refresh token
    wrong = client.get("/api/auth/refresh", headers=_bearer(rotated["accessToken"]))
    assert wrong.status_code == 401


def test_logout_then_refresh_fails(client):
    tokens = _sign_up_and_in(client, "erin")
    r = client.get("/api/auth/logout", headers=_bearer(tokens["accessToken"]))
    assert r.status_code == 200
    r = client.get("/api/auth/refresh", headers=_bearer(tokens["refreshToken"]))
    assert r.status_code == 401


def test_class_lifecycle_over_http(client):
    owner = _bearer(_sign_up_and_in(client, "owner")["accessToken"])
    student_tokens = _sign_up_and_in(client, "student")
    student = _bearer(student_tokens["accessToken"])
    student_id = client.get("/api/auth/me", headers=student).json()["user"]["user_id"]

    r = client.post("/api/classes", json={"title": "History", "description": "WW1"}, headers=owner)
    assert r.status_code == 200
    created = r.json()
    class_id = created["class_id"]

    r = client.post("/api/classes/connect", json={"accessToken": created["access_token"]}, headers=student)
    assert r.status_code == 200
    assert [m["user_id"] for m in r.json()["members"]] == [student_id]

    again = client.post("/api/classes/connect", json={"accessToken": created["access_token"]}, headers=student)
    assert again.status_code == 409

    listed = client.get("/api/classes", headers=student).json()
    assert [c["class_id"] for c in listed["classes"]] == [class_id]

    info = client.get(f"/api/classes/{class_id}", headers=student).json()
    assert info["is_owner"] is False
    assert info["class"]["title"] == "History"

    # member is not allowed to administer
    assert client.patch(f"/api/classes/{class_id}", json={"title": "X"}, headers=student).status_code == 403
    assert client.delete(f"/api/classes/{class_id}", headers=student).status_code == 403
    assert client.get(f"/api/classes/{class_id}/gradeBook", headers=student).status_code == 403

    # owner is
    r = client.patch(f"/api/classes/{class_id}", json={"title": "Modern History"}, headers=owner)
    assert r.status_code == 200
    assert r.json()["description"] == "WW1"
    r = client.post(
        f"/api/classes/{class_id}/marks",
        json={"student_id": student_id, "value": "A"},
        headers=owner,
    )
    assert r.status_code == 200
    book = client.get(f"/api/classes/{class_id}/gradeBook", headers=owner).json()
    assert [m["value"] for m in book] == ["A"]

    r = client.patch(f"/api/classes/{class_id}/removeMember", json={"memberId": student_id}, headers=owner)
    assert r.status_code == 200
    assert r.json()["members"] == []

    me = client.get("/api/auth/me", headers=student).json()
    assert class_id not in me["user"]["class_ids"]
    notification_ids = [n["notification_id"] for n in me["notifications"]]
    assert len(notification_ids) == 1

    r = client.patch(
        "/api/auth/deleteNotifications",
        json={"notification_ids": notification_ids},
        headers=student,
    )
    assert r.status_code == 200
    assert r.json() == []

    assert client.delete(f"/api/classes/{class_id}", headers=owner).status_code == 200
    assert client.get(f"/api/classes/{class_id}", headers=owner).status_code == 404


def test_malformed_class_id_is_400(client):
    owner = _bearer(_sign_up_and_in(client, "frank")["accessToken"])
    r = client.get("/api/classes/not-an-id", headers=owner)
    assert r.status_code == 400
    assert r.json() == {"detail": "Wrong path", "kind": "BadRequest"}


def test_last_owner_cannot_be_removed_over_http(client):
    tokens = _sign_up_and_in(client, "grace")
    owner = _bearer(tokens["accessToken"])
    owner_id = client.get("/api/auth/me", headers=owner).json()["user"]["user_id"]
    class_id = client.post("/api/classes", json={"title": "Art"}, headers=owner).json()["class_id"]

    r = client.patch(f"/api/classes/{class_id}/removeOwner", json={"owners": [owner_id]}, headers=owner)

    assert r.status_code == 409


def test_grade_book_with_malformed_class_id_is_400(client):
    owner = _bearer(_sign_up_and_in(client, "heidi")["accessToken"])
    r = client.get("/api/classes/zzz/gradeBook", headers=owner)
    assert r.status_code == 400
    assert r.json() == {"detail": "Class not found", "kind": "BadRequest"}


def test_blank_titles_are_rejected(client):
    owner = _bearer(_sign_up_and_in(client, "ivan")["accessToken"])
    assert client.post("/api/classes", json={"title": "   "}, headers=owner).status_code == 422

    r = client.post("/api/classes", json={"title": "  Music  "}, headers=owner)
    assert r.status_code == 200
    class_id = r.json()["class_id"]
    assert r.json()["title"] == "Music"

    r = client.post(f"/api/classes/{class_id}/lessons", json={"title": " "}, headers=owner)
    assert r.status_code == 422
    r = client.patch(f"/api/classes/{class_id}", json={"title": "  "}, headers=owner)
    assert r.status_code == 422
