"""Tests for the content sanitization endpoints.

Covers:
- POST /content/sanitize (rich-text HTML)
- POST /content/fields (plain-text JSON fields)
- Size limits and request validation
"""

from fastapi.testclient import TestClient

from inkwell.config import clear_settings_cache


class TestSanitizeContent:
    """Tests for POST /content/sanitize"""

    def test_unterminated_script_yields_only_its_text(self, client: TestClient):
        response = client.post("/content/sanitize", json={"html": "<p>hi</p><script>track()"})

        assert response.json() == {"data": {"html": "<p>hi</p>track()"}}

    def test_sanitizes_html(self, client: TestClient):
        response = client.post(
            "/content/sanitize",
            json={"html": "<p onclick='x()'>Hi</p><script>alert(1)</script>"},
        )

        assert response.status_code == 200
        assert response.json() == {"data": {"html": "<p>Hi</p>alert(1)"}}

    def test_safe_content_round_trips(self, client: TestClient):
        html = '<p style="color: red"><strong>Hello</strong> <em>world</em></p>'
        response = client.post("/content/sanitize", json={"html": html})

        assert response.status_code == 200
        assert response.json()["data"]["html"] == html

    def test_empty_html(self, client: TestClient):
        response = client.post("/content/sanitize", json={"html": ""})

        assert response.status_code == 200
        assert response.json()["data"]["html"] == ""

    def test_html_over_limit_rejected(self, client: TestClient, monkeypatch):
        monkeypatch.setenv("MAX_HTML_BYTES", "10")
        clear_settings_cache()

        response = client.post("/content/sanitize", json={"html": "<p>" + "x" * 20 + "</p>"})

        assert response.status_code == 413
        assert response.json()["error"]["code"] == "E_PAYLOAD_TOO_LARGE"
        assert response.json()["error"]["message"] == "html exceeds the 10 byte limit"

    def test_limit_counts_utf8_bytes(self, client: TestClient, monkeypatch):
        monkeypatch.setenv("MAX_HTML_BYTES", "4")
        clear_settings_cache()

        # Three characters, six bytes
        response = client.post("/content/sanitize", json={"html": "ééé"})

        assert response.status_code == 413

    def test_missing_html_is_invalid_request(self, client: TestClient):
        response = client.post("/content/sanitize", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "E_INVALID_REQUEST"

    def test_non_string_html_is_invalid_request(self, client: TestClient):
        response = client.post("/content/sanitize", json={"html": ["<p>"]})

        assert response.status_code == 400

    def test_malformed_json_is_invalid_request(self, client: TestClient):
        response = client.post(
            "/content/sanitize",
            content=b'{"html": "<p>',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Malformed JSON body"


class TestSanitizeFields:
    """Tests for POST /content/fields"""

    def test_sanitizes_string_fields(self, client: TestClient):
        response = client.post(
            "/content/fields",
            json={"title": "<script>x()</script>Hello", "tags": ["<b>"], "count": 2},
        )

        assert response.status_code == 200
        assert response.json() == {
            "data": {"title": "Hello", "tags": ["&lt;b&gt;"], "count": 2}
        }

    def test_credential_fields_untouched(self, client: TestClient):
        response = client.post("/content/fields", json={"password": " <p> ", "title": "a"})

        assert response.json()["data"] == {"password": " <p> ", "title": "a"}

    def test_configured_skip_fields(self, client: TestClient, monkeypatch):
        monkeypatch.setenv("SANITIZE_SKIP_FIELDS", "bio, signatureHtml")
        clear_settings_cache()

        response = client.post("/content/fields", json={"bio": "<b>", "title": "<b>"})

        assert response.json()["data"] == {"bio": "<b>", "title": "&lt;b&gt;"}

    def test_configured_max_length(self, client: TestClient, monkeypatch):
        monkeypatch.setenv("SANITIZE_MAX_LENGTH", "3")
        clear_settings_cache()

        response = client.post("/content/fields", json={"title": "abcdef"})

        assert response.json()["data"] == {"title": "abc"}

    def test_non_object_body_is_invalid_request(self, client: TestClient):
        response = client.post("/content/fields", json=["<b>"])

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "E_INVALID_REQUEST"


class TestUnknownRoutes:
    def test_unknown_route_returns_not_found_envelope(self, client: TestClient):
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "E_NOT_FOUND"
