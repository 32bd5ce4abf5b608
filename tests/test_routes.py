# =============================================================================
# tests/test_routes.py - Route Group Tests
# =============================================================================
# This module contains tests for:
# - /api/auth token verification and profile
# - /api/users, /api/products, /api/batches CRUD over the fake database
# - /api/consumer public tracing
#
# The database is the in-memory FakeDatabase from conftest.py.
# =============================================================================

from __future__ import annotations

import time
import uuid

import pytest

TEST_USER_ID = uuid.UUID("6f1c2a52-3c1e-4c52-9d0e-8f3b2e7a9b10")


# =============================================================================
# Auth
# =============================================================================

class TestAuth:
    """/api/auth"""

    def test_verify_valid_token(self, client, make_token):
        response = client.get(
            "/api/auth/verify", headers={"Authorization": f"Bearer {make_token()}"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "user_id": str(TEST_USER_ID),
            "email": "grower@example.com",
        }

    def test_missing_token_rejected(self, client):
        response = client.get("/api/auth/verify")

        assert response.status_code in (401, 403)

    def test_expired_token_rejected(self, client, make_token):
        token = make_token(exp=int(time.time()) - 60)

        response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_wrong_audience_rejected(self, client, make_token):
        token = make_token(aud="anon")

        response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_malformed_subject_rejected(self, client, make_token):
        token = make_token(sub="not-a-uuid")

        response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert "malformed" in response.json()["detail"]

    def test_me_falls_back_to_token_claims(self, client, make_token):
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {make_token()}"})

        assert response.status_code == 200
        assert response.json()["id"] == str(TEST_USER_ID)
        assert response.json()["email"] == "grower@example.com"

    def test_me_uses_profile_row(self, client, fake_db, make_token):
        fake_db.add("users", {"id": str(TEST_USER_ID), "name": "Amina", "role": "distributor"})

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {make_token()}"})

        assert response.json()["name"] == "Amina"
        assert response.json()["role"] == "distributor"


# =============================================================================
# Users
# =============================================================================

class TestUsers:
    """/api/users"""

    def test_requires_authentication(self, client):
        assert client.get("/api/users").status_code in (401, 403)

    def test_list_and_filter_by_role(self, client, fake_db, auth_user):
        fake_db.add("users", {"id": str(uuid.uuid4()), "role": "farmer"})
        fake_db.add("users", {"id": str(uuid.uuid4()), "role": "retailer"})

        everyone = client.get("/api/users").json()
        farmers = client.get("/api/users", params={"role": "farmer"}).json()

        assert len(everyone) == 2
        assert [u["role"] for u in farmers] == ["farmer"]

    def test_get_missing_user(self, client, auth_user):
        response = client.get(f"/api/users/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["message"].startswith("User not found")


# =============================================================================
# Products
# =============================================================================

class TestProducts:
    """/api/products"""

    def test_create_from_json(self, client, fake_db, auth_user):
        response = client.post("/api/products", json={"name": "Green Tea", "category": "tea"})

        assert response.status_code == 201
        product = response.json()
        assert product["name"] == "Green Tea"
        assert product["manufacturer_id"] == str(TEST_USER_ID)
        assert product["id"] in fake_db.tables["products"]

    def test_create_from_nested_form(self, client, fake_db, auth_user):
        response = client.post(
            "/api/products",
            data={
                "name": "Coffee Beans",
                "details[origin][country]": "Kenya",
                "details[grade]": "AA",
                "certifications[]": ["organic", "fairtrade"],
            },
        )

        assert response.status_code == 201
        product = response.json()
        assert product["details"] == {"origin": {"country": "Kenya"}, "grade": "AA"}
        assert product["certifications"] == ["organic", "fairtrade"]

    def test_create_requires_name(self, client, auth_user):
        response = client.post("/api/products", json={"category": "tea"})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FIELD"

    def test_malformed_json_rejected(self, client, auth_user):
        response = client.post(
            "/api/products",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_BODY"

    def test_get_product(self, client, fake_db, auth_user):
        product = fake_db.add("products", {"name": "Honey"})

        response = client.get(f"/api/products/{product['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Honey"

    def test_invalid_product_id(self, client, auth_user):
        assert client.get("/api/products/not-a-uuid").status_code == 422


# =============================================================================
# Batches
# =============================================================================

class TestBatches:
    """/api/batches"""

    def test_create_batch_for_existing_product(self, client, fake_db, auth_user):
        product = fake_db.add("products", {"name": "Cocoa"})

        response = client.post(
            "/api/batches", json={"product_id": product["id"], "quantity": 500}
        )

        assert response.status_code == 201
        assert response.json()["product_id"] == product["id"]
        assert response.json()["created_by"] == str(TEST_USER_ID)

    def test_create_batch_unknown_product(self, client, auth_user):
        response = client.post("/api/batches", json={"product_id": str(uuid.uuid4())})

        assert response.status_code == 404

    def test_create_batch_requires_product(self, client, auth_user):
        response = client.post("/api/batches", json={"quantity": 5})

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "product_id"}

    @pytest.mark.parametrize("product_id", ["abc", "12345", ["not", "an", "id"]])
    def test_create_batch_malformed_product_id(self, client, fake_db, auth_user, product_id):
        response = client.post("/api/batches", json={"product_id": product_id})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FIELD"
        assert response.json()["details"] == {"field": "product_id"}
        assert fake_db.tables["batches"] == {}

    def test_create_batch_malformed_product_id_from_form(self, client, auth_user):
        response = client.post("/api/batches", data={"product_id": "batch-7"})

        assert response.status_code == 400

    def test_list_filtered_by_product(self, client, fake_db, auth_user):
        cocoa = fake_db.add("products", {"name": "Cocoa"})
        fake_db.add("batches", {"product_id": cocoa["id"]})
        fake_db.add("batches", {"product_id": str(uuid.uuid4())})

        batches = client.get("/api/batches", params={"product_id": cocoa["id"]}).json()

        assert [b["product_id"] for b in batches] == [cocoa["id"]]


# =============================================================================
# Consumer
# =============================================================================

class TestConsumer:
    """/api/consumer"""

    def test_trace_is_public(self, client, fake_db):
        product = fake_db.add("products", {"name": "Olive Oil"})
        batch = fake_db.add("batches", {"product_id": product["id"], "harvested": "2024-10-01"})

        response = client.get(f"/api/consumer/trace/{batch['id']}")

        assert response.status_code == 200
        assert response.json()["batch"]["id"] == batch["id"]
        assert response.json()["product"]["name"] == "Olive Oil"

    def test_trace_unknown_batch(self, client):
        response = client.get(f"/api/consumer/trace/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "RECORD_NOT_FOUND"
