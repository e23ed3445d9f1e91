# tests/test_api.py
"""End-to-end tests through the FastAPI app."""
from sqlalchemy import select

from conftest import register_and_login

from cryptic_chest.app.models.password import Password
from cryptic_chest.app.security.encryption import decrypt, derive_user_key

MAIL = {"name": "Mail", "url": "https://mail.example", "username": "a@b.com", "password": "p@ss"}


async def add(client, headers, **fields):
    body = dict(MAIL, **fields)
    response = await client.post("/api/passwords/", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestAuth:
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200

    async def test_register_login_me(self, client, alice):
        user, headers = alice
        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"
        assert "hashed_password" not in response.json()

    async def test_duplicate_registration(self, client, alice):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "Alice@Example.com", "password": "whatever"},
        )
        assert response.status_code == 400

    async def test_wrong_password(self, client, alice):
        response = await client.post(
            "/api/auth/login", data={"username": "alice@example.com", "password": "nope"}
        )
        assert response.status_code == 401

    async def test_requires_token(self, client):
        assert (await client.get("/api/passwords/")).status_code == 401
        bad = {"Authorization": "Bearer not-a-token"}
        assert (await client.get("/api/passwords/", headers=bad)).status_code == 401


class TestPasswords:
    async def test_secret_encrypted_at_rest(self, client, alice, db):
        user, headers = alice
        created = await add(client, headers)
        assert created["password"] == "p@ss"
        assert created["user_id"] == user["id"]

        stored = (await db.execute(select(Password).where(Password.id == created["id"]))).scalars().one()
        assert stored.password != "p@ss"
        assert decrypt(stored.password, derive_user_key(user["id"])) == "p@ss"

    async def test_list_update_delete(self, client, alice, cache):
        user, headers = alice
        created = await add(client, headers)

        listed = (await client.get("/api/passwords/", headers=headers)).json()
        assert [p["password"] for p in listed] == ["p@ss"]
        assert user["id"] in cache

        response = await client.put(
            f"/api/passwords/{created['id']}", json={"password": "n3w", "favorite": True}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["password"] == "n3w"
        assert response.json()["favorite"] is True
        assert response.json()["username"] == "a@b.com"
        assert user["id"] not in cache

        listed = (await client.get("/api/passwords/", headers=headers)).json()
        assert listed[0]["password"] == "n3w"

        response = await client.delete(f"/api/passwords/{created['id']}", headers=headers)
        assert response.status_code == 200
        assert (await client.get("/api/passwords/", headers=headers)).json() == []

    async def test_unknown_id(self, client, alice):
        _, headers = alice
        assert (await client.get("/api/passwords/missing", headers=headers)).status_code == 404
        assert (await client.delete("/api/passwords/missing", headers=headers)).status_code == 404
        assert (await client.put("/api/passwords/missing", json={"notes": "x"}, headers=headers)).status_code == 404

    async def test_other_users_records_are_forbidden(self, client, alice):
        _, alice_headers = alice
        created = await add(client, alice_headers)
        _, bob_headers = await register_and_login(client, email="bob@example.com", name="Bob")

        assert (await client.get(f"/api/passwords/{created['id']}", headers=bob_headers)).status_code == 403
        response = await client.put(f"/api/passwords/{created['id']}", json={"name": "x"}, headers=bob_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "access_denied"
        assert (await client.delete(f"/api/passwords/{created['id']}", headers=bob_headers)).status_code == 403
        assert (await client.get(f"/api/passwords/{created['id']}", headers=alice_headers)).status_code == 200
        assert (await client.get("/api/passwords/", headers=bob_headers)).json() == []

    async def test_search_and_category(self, client, alice):
        _, headers = alice
        await add(client, headers, name="Mail", category="Email")
        await add(client, headers, name="GitHub", username="octo", category="Work", notes="2fa on")

        found = (await client.get("/api/passwords/search", params={"query": "GIT"}, headers=headers)).json()
        assert [p["name"] for p in found] == ["GitHub"]
        found = (await client.get("/api/passwords/search", params={"query": "2FA"}, headers=headers)).json()
        assert [p["name"] for p in found] == ["GitHub"]
        everything = (await client.get("/api/passwords/search", headers=headers)).json()
        assert len(everything) == 2

        work = (await client.get("/api/passwords/category/Work", headers=headers)).json()
        assert [p["name"] for p in work] == ["GitHub"]

    async def test_reset_all(self, client, alice):
        user, headers = alice
        await add(client, headers)
        await add(client, headers, name="Other")

        response = await client.request(
            "DELETE", f"/api/passwords/user/{user['id']}", json={"password": "wrong"}, headers=headers
        )
        assert response.status_code == 401

        response = await client.request(
            "DELETE", f"/api/passwords/user/{user['id']}", json={"password": "correct horse"}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["count"] == 2
        assert (await client.get("/api/passwords/", headers=headers)).json() == []

    async def test_reset_other_user_forbidden(self, client, alice):
        _, headers = alice
        response = await client.request(
            "DELETE", "/api/passwords/user/someone-else", json={"password": "correct horse"}, headers=headers
        )
        assert response.status_code == 403

    async def test_corrupted_record_reports_key_mismatch(self, client, alice, db):
        user, headers = alice
        created = await add(client, headers)
        stored = await db.get(Password, created["id"])
        stored.password = stored.password.split(".")[0] + ".AAAAAAAA"
        await db.commit()

        response = await client.get(f"/api/passwords/{created['id']}", headers=headers)
        assert response.status_code == 409
        assert response.json()["error"] == "key_mismatch"

    async def test_logout_clears_cache(self, client, alice, cache):
        user, headers = alice
        await add(client, headers)
        await client.get("/api/passwords/", headers=headers)
        assert user["id"] in cache

        assert (await client.post("/api/auth/logout", headers=headers)).status_code == 200
        assert user["id"] not in cache

    async def test_delete_account(self, client, alice):
        user, headers = alice
        await add(client, headers)
        response = await client.request("DELETE", "/api/auth/me", json={"password": "correct horse"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert (await client.get("/api/auth/me", headers=headers)).status_code == 404


class TestGenerator:
    async def test_generate(self, client):
        response = await client.post("/api/generator/password", json={
            "length": 12, "include_uppercase": True, "include_lowercase": True,
            "include_numbers": True, "include_symbols": False,
        })
        assert response.status_code == 200
        password = response.json()["password"]
        assert len(password) == 12
        assert password.isalnum()

    async def test_defaults(self, client):
        response = await client.post("/api/generator/password", json={})
        assert len(response.json()["password"]) == 16

    async def test_no_class_selected(self, client):
        response = await client.post("/api/generator/password", json={
            "include_uppercase": False, "include_lowercase": False,
            "include_numbers": False, "include_symbols": False,
        })
        assert response.status_code == 400
        assert response.json()["error"] == "configuration_error"

    async def test_invalid_length(self, client):
        response = await client.post("/api/generator/password", json={"length": 0})
        assert response.status_code == 422

    async def test_long_length(self, client):
        response = await client.post("/api/generator/password", json={"length": 200})
        assert response.status_code == 200
        assert len(response.json()["password"]) == 200

    async def test_request_length_capped(self, client):
        response = await client.post("/api/generator/password", json={"length": 1025})
        assert response.status_code == 422

    async def test_strength(self, client):
        response = await client.post("/api/generator/strength", json={"password": "Abcdefgh1!"})
        assert response.json() == {"score": 90, "label": "Strong"}


class TestBackup:
    async def test_recovery_phrase(self, client, alice):
        _, headers = alice
        response = await client.get("/api/backup/recovery-phrase", headers=headers)
        assert response.status_code == 200
        assert 10 <= len(response.json()["recovery_phrase"].split()) <= 15

    async def test_download_headers(self, client, alice):
        _, headers = alice
        response = await client.post("/api/backup/", json={"recovery_phrase": "ace add air"}, headers=headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="cryptic-chest-backup-')
        assert disposition.endswith('.json"')
        assert "_" in response.text

    async def test_backup_and_restore_scenario(self, client, alice):
        _, headers = alice
        await add(client, headers, url=None)

        blob = (await client.post("/api/backup/", json={"recovery_phrase": "ace add air"}, headers=headers)).text

        response = await client.post(
            "/api/backup/restore",
            files={"file": ("backup.json", blob, "application/json")},
            data={"recovery_phrase": "ace add bad"},
            headers=headers,
        )
        assert response.status_code == 401
        assert response.json()["error"] == "recovery_phrase_error"
        intact = (await client.get("/api/passwords/", headers=headers)).json()
        assert [(p["username"], p["password"]) for p in intact] == [("a@b.com", "p@ss")]

        await add(client, headers, name="Added after backup")

        response = await client.post(
            "/api/backup/restore",
            files={"file": ("backup.json", blob, "application/json")},
            data={"recovery_phrase": "  ace add   air "},
            headers=headers,
        )
        assert response.status_code == 200, response.text
        assert response.json()["restored"] == 1

        restored = (await client.get("/api/passwords/", headers=headers)).json()
        assert [(p["name"], p["username"], p["password"]) for p in restored] == [("Mail", "a@b.com", "p@ss")]

    async def test_restore_into_another_account(self, client, alice):
        _, alice_headers = alice
        await add(client, alice_headers)
        blob = (await client.post("/api/backup/", json={"recovery_phrase": "dog cat"}, headers=alice_headers)).text

        bob, bob_headers = await register_and_login(client, email="bob@example.com", name="Bob")
        response = await client.post(
            "/api/backup/restore",
            files={"file": ("backup.json", blob, "application/json")},
            data={"recovery_phrase": "dog cat"},
            headers=bob_headers,
        )
        assert response.status_code == 200

        restored = (await client.get("/api/passwords/", headers=bob_headers)).json()
        assert [p["user_id"] for p in restored] == [bob["id"]]
        assert restored[0]["password"] == "p@ss"
        assert len((await client.get("/api/passwords/", headers=alice_headers)).json()) == 1

    async def test_restore_garbage_file(self, client, alice):
        _, headers = alice
        response = await client.post(
            "/api/backup/restore",
            files={"file": ("backup.json", "{\"not\": \"a backup\"}", "application/json")},
            data={"recovery_phrase": "ace"},
            headers=headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "format_error"
