import pytest
from jose import jwt

from catalog.core.security import (
    InvalidTokenError,
    Principal,
    create_access_token,
    decode_access_token,
)

PRODUCTS_URL = "/api/v1/products"


def test_reads_do_not_require_a_token(client, make_product):
    product = make_product(category="Tools")

    assert client.get(f"{PRODUCTS_URL}/").status_code == 200
    assert client.get(f"{PRODUCTS_URL}/{product.id}").status_code == 200
    assert client.get(f"{PRODUCTS_URL}/by-category/Tools").status_code == 200


def test_create_without_token_is_unauthorized(client, product_payload):
    response = client.post(f"{PRODUCTS_URL}/", json=product_payload())
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_create_with_invalid_token_is_unauthorized(client, product_payload):
    response = client.post(
        f"{PRODUCTS_URL}/",
        json=product_payload(),
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


def test_create_without_editor_role_is_forbidden(client, viewer_headers, product_payload):
    response = client.post(f"{PRODUCTS_URL}/", json=product_payload(), headers=viewer_headers)
    assert response.status_code == 403


def test_admin_counts_as_editor(client, admin_headers, product_payload):
    response = client.post(f"{PRODUCTS_URL}/", json=product_payload(), headers=admin_headers)
    assert response.status_code == 201


def test_update_without_token_is_unauthorized(client, make_product):
    product = make_product()
    body = {"name": "x", "price": 1, "category": "c", "stockQuantity": 0}
    assert client.put(f"{PRODUCTS_URL}/{product.id}", json=body).status_code == 401


def test_delete_requires_admin(client, make_product, editor_headers, admin_headers):
    product = make_product()

    assert client.delete(f"{PRODUCTS_URL}/{product.id}").status_code == 401
    assert (
        client.delete(f"{PRODUCTS_URL}/{product.id}", headers=editor_headers).status_code
        == 403
    )
    assert (
        client.delete(f"{PRODUCTS_URL}/{product.id}", headers=admin_headers).status_code
        == 204
    )


def test_token_round_trip_keeps_subject_and_roles():
    principal = decode_access_token(create_access_token("u1", ["Librarian"]))
    assert principal == Principal(subject="u1", roles=frozenset({"Librarian"}))


def test_single_role_claim_is_accepted():
    token = jwt.encode({"sub": "u2", "role": "Admin"}, "test-secret", algorithm="HS256")
    principal = decode_access_token(token)
    assert principal.has_any_role(["Admin"])
    assert not principal.has_any_role(["Librarian"])


def test_expired_token_is_rejected():
    token = create_access_token("u3", ["Admin"], expires_minutes=-1)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": "u4", "roles": ["Admin"]}, "other", algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_without_subject_is_rejected():
    token = jwt.encode({"roles": ["Admin"]}, "test-secret", algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)
