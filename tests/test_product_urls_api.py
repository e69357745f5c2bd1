"""HTTP tests for /api/v1/products/{product_id}/urls"""

import pytest

from marketplace import models

BASE = "/api/v1/products/prod-1/urls"


def _post(client, headers, slug, default=False, language_id=1):
    return client.post(BASE, json={"slug": slug, "language_id": language_id, "default": default}, headers=headers)


@pytest.mark.usefixtures("english", "product")
class TestProductUrlEndpoints:
    def test_create_returns_201_with_data(self, client, headers):
        response = _post(client, headers, "home", default=True)

        assert response.status_code == 201
        body = response.json()["data"]
        assert body["slug"] == "home"
        assert body["default"] is True
        assert body["language"] == {"id": 1, "code": "en", "name": "English"}
        assert body["element_id"] == "prod-1"
        assert "X-Request-Id" in response.headers

    def test_list_urls(self, client, headers):
        _post(client, headers, "home", default=True)
        _post(client, headers, "home-alt")

        response = client.get(BASE, headers=headers)
        assert response.status_code == 200
        assert [item["slug"] for item in response.json()["data"]] == ["home", "home-alt"]

    def test_show_url(self, client, headers):
        url_id = _post(client, headers, "home").json()["data"]["id"]

        response = client.get(f"{BASE}/{url_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["id"] == url_id

    def test_show_missing_url(self, client, headers):
        response = client.get(f"{BASE}/999", headers=headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "URL not found"

    def test_duplicate_slug_is_422(self, client, headers):
        _post(client, headers, "home")

        response = _post(client, headers, "home")
        assert response.status_code == 422
        assert response.json()["errors"] == {"slug": ["Slug already exists for this language"]}

    def test_invalid_language_is_422(self, client, headers):
        response = _post(client, headers, "home", language_id=77)
        assert response.status_code == 422
        assert "language_id" in response.json()["errors"]

    def test_missing_slug_is_422(self, client, headers):
        response = client.post(BASE, json={"language_id": 1}, headers=headers)
        assert response.status_code == 422

    def test_update_url(self, client, headers):
        url_id = _post(client, headers, "home").json()["data"]["id"]

        response = client.put(f"{BASE}/{url_id}", json={"slug": "start", "default": True}, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["slug"] == "start"
        assert response.json()["data"]["default"] is True

    def test_delete_promotes_and_returns_message(self, client, headers):
        home = _post(client, headers, "home", default=True).json()["data"]["id"]
        alt = _post(client, headers, "home-alt").json()["data"]["id"]

        response = client.delete(f"{BASE}/{home}", headers=headers)
        assert response.status_code == 200
        assert "deleted successfully" in response.json()["message"]

        default = client.get(f"{BASE}/default", params={"language_code": "en"}, headers=headers)
        assert default.status_code == 200
        assert default.json()["data"]["id"] == alt

        again = client.delete(f"{BASE}/{home}", headers=headers)
        assert again.status_code == 404

    def test_set_default(self, client, headers):
        _post(client, headers, "home", default=True)
        alt = _post(client, headers, "home-alt").json()["data"]["id"]

        response = client.post(f"{BASE}/{alt}/set-default", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["default"] is True

        listed = client.get(BASE, headers=headers).json()["data"]
        assert [item["default"] for item in listed] == [False, True]

    def test_default_requires_language_code(self, client, headers):
        response = client.get(f"{BASE}/default", headers=headers)
        assert response.status_code == 400

    def test_default_unknown_language(self, client, headers):
        response = client.get(f"{BASE}/default", params={"language_code": "xx"}, headers=headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Language not found"

    def test_default_not_found(self, client, headers):
        _post(client, headers, "home")

        response = client.get(f"{BASE}/default", params={"language_code": "en"}, headers=headers)
        assert response.status_code == 404
        assert response.json() == {"message": "No default URL found", "data": None}

    def test_generate_slug(self, client, headers):
        response = client.post(
            f"{BASE}/generate-slug", json={"name": "Test Product", "language_id": 1}, headers=headers
        )
        assert response.status_code == 200
        assert response.json() == {"data": {"slug": "test-product"}}

        _post(client, headers, "test-product")
        response = client.post(
            f"{BASE}/generate-slug", json={"name": "Test Product", "language_id": 1}, headers=headers
        )
        assert response.json()["data"]["slug"] == "test-product-1"

    def test_unknown_product_is_404(self, client, headers):
        response = client.get("/api/v1/products/nope/urls", headers=headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"


@pytest.mark.usefixtures("english", "product")
class TestTenantHeaders:
    def test_missing_header_is_400(self, client):
        response = client.get(BASE)
        assert response.status_code == 400

    def test_unknown_tenant_is_404(self, client):
        response = client.get(BASE, headers={"X-Tenant-Id": "does-not-exist"})
        assert response.status_code == 404

    def test_slug_header_resolves_tenant(self, client):
        response = client.get(BASE, headers={"X-Tenant": "ACME"})
        assert response.status_code == 200

    def test_blank_id_header_uses_slug_header(self, client):
        response = client.get(BASE, headers={"X-Tenant-Id": "  ", "X-Tenant": "acme"})
        assert response.status_code == 200

    def test_inactive_tenant_is_403(self, client, db, tenant):
        tenant.status = models.TenantStatus.inactive
        db.commit()

        response = client.get(BASE, headers={"X-Tenant-Id": tenant.id})
        assert response.status_code == 403


class TestAuxiliaryEndpoints:
    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True}

    def test_list_languages(self, client, german):
        response = client.get("/api/v1/languages")
        assert response.status_code == 200
        assert [item["code"] for item in response.json()["data"]] == ["de", "en"]

    def test_tenant_config(self, client, headers):
        response = client.get("/api/v1/tenant/config", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["slug"] == "acme"
        assert body["default_language"] == "en"
        assert body["branding"]["primary_color"] == "#112233"
        assert body["branding"]["secondary_color"] == "#dc004e"
        assert body["branding"]["display_name"] == "Acme"

    def test_tenant_config_falls_back_to_configured_language(self, client, other_tenant):
        response = client.get("/api/v1/tenant/config", headers={"X-Tenant-Id": other_tenant.id})

        assert response.status_code == 200
        assert response.json()["default_language"] == "en"
        assert response.json()["branding"]["primary_color"] == "#1976d2"
