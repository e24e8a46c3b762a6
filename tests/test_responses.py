"""Tests for the server-side response helpers."""

import json

from svcutils.dates import Date
from svcutils.http import (
    empty_response,
    error_empty_response,
    error_response,
    json_response,
    ok_response,
    unauthorized_response,
)


class TestResponses:
    """Tests for response constructors."""

    def test_empty(self):
        """Test a status-only response."""
        response = empty_response(204)
        assert response.status_code == 204
        assert response.content == b""

    def test_error(self):
        """Test an error with an html body."""
        response = error_response("bad input", 400)
        assert response.status_code == 400
        assert response.text == "bad input"
        assert response.headers["content-type"].startswith("text/html")

    def test_error_empty(self):
        """Test an error with only the content type."""
        response = error_empty_response(500)
        assert response.status_code == 500
        assert response.content == b""
        assert response.headers["content-type"] == "text/html; charset=utf-8"

    def test_ok(self):
        """Test a 200 text response."""
        response = ok_response("done")
        assert response.status_code == 200
        assert response.text == "done"

    def test_json(self):
        """Test a JSON response including a Date value."""
        response = json_response({"at": Date.parse("2022-10-26T13:23:52"), "n": 1})
        assert response.status_code == 200
        assert json.loads(response.content) == {"at": "2022-10-26T13:23:52", "n": 1}

    def test_unauthorized(self):
        """Test the 401 response."""
        response = unauthorized_response()
        assert response.status_code == 401
        assert response.content == b"Unauthorized"
