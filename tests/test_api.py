from .conftest import ADMIN_EMAIL, bearer, login


def _directory(client, headers):
    d = client.post("/drivers", headers=headers, json={"name": "Carlos Lima", "phone": "555-0100"}).json()
    co = client.post("/companies", headers=headers, json={"name": "Blue Line Travel"}).json()
    return d, co


def _trip_body(driver_id, company_id, **extra):
    body = {
        "driverId": driver_id,
        "companyId": company_id,
        "startAt": "2024-05-01T10:00:00Z",
        "endAt": "2024-05-01T11:00:00Z",
        "origin": "JFK",
        "destination": "Manhattan",
        "miles": 20,
        "durationMinutes": 45,
        "price": 120,
    }
    body.update(extra)
    return body


def test_health_is_public(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_protected_routes_need_a_token(client):
    resp = client.get("/trips")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing Bearer token"}

    resp = client.get("/drivers", headers=bearer("garbage"))
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid token"}


def test_login(client):
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL.upper(), "password": "admin"})
    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "no-store"
    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == ADMIN_EMAIL
    assert body["user"]["role"] == "admin"
    assert "passwordHash" not in body["user"]


def test_login_rejects_bad_password(client):
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": "nope!"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid email or password"}


def test_bad_body_is_400(client, admin_headers):
    resp = client.post("/auth/login", json={"email": "not-an-email", "password": "admin"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"

    resp = client.post("/drivers", headers=admin_headers, json={"name": "X"})
    assert resp.status_code == 400


def test_users_are_admin_only(client, make_user):
    _, headers = make_user("dispatcher@limo.local")
    resp = client.get("/users", headers=headers)
    assert resp.status_code == 403
    assert resp.json() == {"error": "Forbidden"}


def test_user_management(client, admin_headers):
    resp = client.post("/users", headers=admin_headers,
                       json={"name": "Mia Park", "email": "Mia@Limo.local", "password": "secret1"})
    assert resp.status_code == 201
    mia = resp.json()
    assert mia["email"] == "mia@limo.local"
    assert mia["role"] == "user"
    assert "passwordHash" not in mia

    dup = client.post("/users", headers=admin_headers,
                      json={"name": "Mia Two", "email": "mia@limo.local", "password": "secret1"})
    assert dup.status_code == 409
    assert dup.json() == {"error": "Email already exists"}

    resp = client.put(f"/users/{mia['id']}", headers=admin_headers, json={"role": "admin"})
    assert resp.json()["role"] == "admin"
    assert resp.json()["name"] == "Mia Park"

    resp = client.post(f"/users/{mia['id']}/reset-password", headers=admin_headers)
    assert resp.json() == {"ok": True}
    login(client, "mia@limo.local", "admin")

    assert client.delete(f"/users/{mia['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/users/{mia['id']}", headers=admin_headers).status_code == 404


def test_directory_crud(client, admin_headers):
    d, _ = _directory(client, admin_headers)
    assert d["active"] is True
    assert "createdAt" in d

    resp = client.put(f"/drivers/{d['id']}", headers=admin_headers, json={"name": "Carlos R. Lima"})
    assert resp.json()["name"] == "Carlos R. Lima"

    resp = client.patch(f"/drivers/{d['id']}/active", headers=admin_headers, json={"active": False})
    assert resp.json()["active"] is False

    resp = client.put("/drivers/d_missing", headers=admin_headers, json={"name": "Nobody"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Driver not found"}

    assert client.delete(f"/drivers/{d['id']}", headers=admin_headers).status_code == 200
    assert client.get("/drivers", headers=admin_headers).json() == []


def test_trip_lifecycle(client, admin_headers):
    d, co = _directory(client, admin_headers)

    resp = client.post("/trips", headers=admin_headers,
                       json=_trip_body(d["id"], co["id"], clientName="  Acme Corp ", meetGreet="Sign: ACME"))
    assert resp.status_code == 201
    trip = resp.json()
    assert trip["received"] is False
    assert trip["clientId"]

    clients = client.get("/clients", headers=admin_headers).json()
    assert [c["name"] for c in clients] == ["Acme Corp"]

    # same name again reuses the client
    again = client.post("/trips", headers=admin_headers,
                        json=_trip_body(d["id"], co["id"], clientName="acme corp")).json()
    assert again["clientId"] == trip["clientId"]

    resp = client.put(f"/trips/{trip['id']}", headers=admin_headers,
                      json=_trip_body(d["id"], co["id"], clientId=trip["clientId"], price=150))
    assert resp.json()["price"] == 150
    assert resp.json()["meetGreet"] == "Sign: ACME"

    resp = client.patch(f"/trips/{trip['id']}/received", headers=admin_headers, json={"received": True})
    assert resp.json()["received"] is True

    resp = client.delete(f"/trips/{trip['id']}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json() == {"error": "Cannot delete a received trip"}

    resp = client.delete(f"/drivers/{d['id']}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json() == {"error": "Cannot delete driver with trips"}


def test_trip_with_unknown_driver_is_400(client, admin_headers):
    _, co = _directory(client, admin_headers)
    resp = client.post("/trips", headers=admin_headers, json=_trip_body("d_missing", co["id"]))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Driver not found"}


def test_trip_filters_over_http(client, admin_headers):
    d, co = _directory(client, admin_headers)
    a = client.post("/trips", headers=admin_headers,
                    json=_trip_body(d["id"], co["id"], cnf="ABC-1", meetGreet="Board")).json()
    b = client.post("/trips", headers=admin_headers,
                    json=_trip_body(d["id"], co["id"], startAt="2024-06-01T10:00:00Z")).json()

    def ids(resp):
        return [t["id"] for t in resp.json()]

    assert ids(client.get("/trips", headers=admin_headers)) == [b["id"], a["id"]]
    assert ids(client.get("/trips", headers=admin_headers, params={"cnf": "abc"})) == [a["id"]]
    assert ids(client.get("/trips", headers=admin_headers, params={"meetGreet": "true"})) == [a["id"]]
    assert ids(client.get("/trips", headers=admin_headers, params={"meetGreet": "false"})) == [b["id"]]
    assert ids(client.get("/trips", headers=admin_headers, params={"driverId": d["id"]})) == [b["id"], a["id"]]


def test_trips_are_scoped_to_their_owner(client, admin_headers, make_user):
    d, co = _directory(client, admin_headers)
    _, alice = make_user("alice@limo.local")
    _, bob = make_user("bob@limo.local")

    mine = client.post("/trips", headers=alice, json=_trip_body(d["id"], co["id"], price=100)).json()
    client.post("/trips", headers=bob, json=_trip_body(d["id"], co["id"], price=40))

    assert [t["id"] for t in client.get("/trips", headers=alice).json()] == [mine["id"]]
    assert len(client.get("/trips", headers=admin_headers).json()) == 2

    assert client.get(f"/trips/{mine['id']}", headers=bob).status_code == 403
    assert client.put(f"/trips/{mine['id']}", headers=bob,
                      json=_trip_body(d["id"], co["id"])).status_code == 403
    assert client.delete(f"/trips/{mine['id']}", headers=bob).status_code == 403
    assert client.get("/trips/t_missing", headers=bob).status_code == 404

    assert client.get(f"/trips/{mine['id']}", headers=admin_headers).status_code == 200

    summary = client.get("/dashboard", headers=alice).json()
    assert summary == {"totalTrips": 1, "totalRevenue": 100.0, "totalMiles": 20.0, "avgDurationMinutes": 45.0}
    assert client.get("/dashboard", headers=admin_headers).json()["totalTrips"] == 2


def test_user_with_trips_cannot_be_deleted(client, admin_headers, make_user):
    d, co = _directory(client, admin_headers)
    alice, headers = make_user("alice@limo.local")
    client.post("/trips", headers=headers, json=_trip_body(d["id"], co["id"]))

    resp = client.delete(f"/users/{alice['id']}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json() == {"error": "Cannot delete user with trips"}


def test_new_client_by_name_shows_up_in_admin_dashboard(client, admin_headers, make_user):
    d, co = _directory(client, admin_headers)
    u1, headers = make_user("u1@limo.local")

    resp = client.post("/trips", headers=headers,
                       json=_trip_body(d["id"], co["id"], clientName="Acme", miles=10, durationMinutes=20, price=99.5))
    assert resp.status_code == 201
    trip = resp.json()
    assert trip["received"] is False
    assert trip["createdByUserId"] == u1["id"]

    acme = [c for c in client.get("/clients", headers=admin_headers).json() if c["name"] == "Acme"]
    assert [c["id"] for c in acme] == [trip["clientId"]]

    summary = client.get("/dashboard", headers=admin_headers).json()
    assert summary == {"totalTrips": 1, "totalRevenue": 99.5, "totalMiles": 10.0, "avgDurationMinutes": 20.0}


def test_password_limit_counts_bytes(client, admin_headers):
    # 40 characters but 80 bytes in UTF-8
    long_pw = "é" * 40
    resp = client.post("/users", headers=admin_headers,
                       json={"name": "Zé Lima", "email": "ze@limo.local", "password": long_pw})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"

    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": long_pw})
    assert resp.status_code == 400

    ok = client.post("/users", headers=admin_headers,
                     json={"name": "Zé Lima", "email": "ze@limo.local", "password": "é" * 36})
    assert ok.status_code == 201
    login(client, "ze@limo.local", "é" * 36)


def test_missing_trip_is_404_for_every_write(client, admin_headers, make_user):
    d, co = _directory(client, admin_headers)
    _, bob = make_user("bob@limo.local")

    resp = client.put("/trips/t_missing", headers=bob, json=_trip_body(d["id"], co["id"]))
    assert resp.status_code == 404
    assert resp.json() == {"error": "Trip not found"}
    assert client.patch("/trips/t_missing/received", headers=bob, json={"received": True}).status_code == 404
    assert client.delete("/trips/t_missing", headers=bob).status_code == 404


def test_non_owner_cannot_mark_received(client, admin_headers, make_user):
    d, co = _directory(client, admin_headers)
    _, alice = make_user("alice@limo.local")
    _, bob = make_user("bob@limo.local")
    trip = client.post("/trips", headers=alice, json=_trip_body(d["id"], co["id"])).json()

    resp = client.patch(f"/trips/{trip['id']}/received", headers=bob, json={"received": True})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Forbidden"}
    assert client.get(f"/trips/{trip['id']}", headers=alice).json()["received"] is False


def test_fractional_duration_is_accepted(client, admin_headers):
    d, co = _directory(client, admin_headers)
    resp = client.post("/trips", headers=admin_headers, json=_trip_body(d["id"], co["id"], durationMinutes=20.6))
    assert resp.status_code == 201
    assert resp.json()["durationMinutes"] == 21
