"""Tests for the FitLog API transport."""

import pytest

import requests
import responses
from responses import matchers

from fitlog.auth.session import AuthGate
from fitlog.sync.http_client import (
    DecodeError,
    HttpError,
    NetworkError,
    RemoteClient,
    RemoteError,
    ServerFault,
    ServerRejection,
)

API_URL = "https://api.fitlog.test"


class TestHttpError:
    """Tests for status classification."""

    def test_5xx_is_server_fault(self):
        """Test 5xx maps to ServerFault."""
        error = HttpError.for_status(503, "down")

        assert isinstance(error, ServerFault)
        assert error.status == 503
        assert str(error) == "HTTP 503: down"

    def test_4xx_is_server_rejection(self):
        """Test 4xx maps to ServerRejection."""
        error = HttpError.for_status(404)

        assert isinstance(error, ServerRejection)
        assert str(error) == "HTTP 404"

    def test_all_share_remote_error(self):
        """Test the exception hierarchy."""
        assert issubclass(NetworkError, RemoteError)
        assert issubclass(ServerFault, RemoteError)
        assert issubclass(DecodeError, RemoteError)


class TestRemoteClient:
    """Tests for RemoteClient."""

    def setup_method(self):
        """Set up test fixtures."""
        self.auth = AuthGate(token="test-token")
        self.client = RemoteClient(api_url=API_URL + "/", auth=self.auth, timeout=5)

    def teardown_method(self):
        """Clean up."""
        self.client.close()

    def test_base_url_trailing_slash_stripped(self):
        """Test paths join cleanly onto the base URL."""
        assert self.client._url("/api/routines") == f"{API_URL}/api/routines"

    def test_headers_with_token(self):
        """Test bearer token is attached when signed in."""
        headers = self.client._get_headers()

        assert headers["Authorization"] == "Bearer test-token"
        assert headers["Accept"] == "application/json"

    def test_headers_without_token(self):
        """Test no Authorization header when signed out."""
        self.auth.clear()

        assert "Authorization" not in self.client._get_headers()

    @responses.activate
    def test_send_returns_json(self):
        """Test a successful response is decoded."""
        responses.add(
            responses.GET,
            f"{API_URL}/api/routines",
            json=[{"id": 1, "clientId": "r1"}],
            status=200,
        )

        result = self.client._send("GET", "/api/routines", None, None, 5)

        assert result == [{"id": 1, "clientId": "r1"}]
        assert responses.calls[0].request.headers["Authorization"] == "Bearer test-token"

    @responses.activate
    def test_send_posts_json_body(self):
        """Test the body is sent as JSON."""
        responses.add(
            responses.POST,
            f"{API_URL}/api/body-weights",
            json={"id": 7},
            status=200,
            match=[matchers.json_params_matcher({"clientId": "w1", "weightKg": 80})],
        )

        result = self.client._send(
            "POST", "/api/body-weights", {"clientId": "w1", "weightKg": 80}, None, 5
        )

        assert result == {"id": 7}

    @responses.activate
    def test_send_query_params(self):
        """Test query parameters are encoded."""
        responses.add(
            responses.GET,
            f"{API_URL}/api/food-logs",
            json=[],
            status=200,
            match=[matchers.query_param_matcher({"date": "2026-01-05"})],
        )

        assert self.client._send("GET", "/api/food-logs", None, {"date": "2026-01-05"}, 5) == []

    @responses.activate
    def test_empty_body_returns_empty_dict(self):
        """Test an empty 2xx body."""
        responses.add(responses.DELETE, f"{API_URL}/api/runs/r1", body="", status=200)

        assert self.client._send("DELETE", "/api/runs/r1", None, None, 5) == {}

    @responses.activate
    def test_invalid_json_raises_decode_error(self):
        """Test a non-JSON body."""
        responses.add(responses.GET, f"{API_URL}/api/runs", body="<html>", status=200)

        with pytest.raises(DecodeError):
            self.client._send("GET", "/api/runs", None, None, 5)

    @responses.activate
    def test_4xx_raises_server_rejection_with_detail(self):
        """Test error detail is taken from the response body."""
        responses.add(
            responses.POST,
            f"{API_URL}/api/auth/login",
            json={"error": "Invalid email or password"},
            status=401,
        )

        with pytest.raises(ServerRejection) as exc_info:
            self.client._send("POST", "/api/auth/login", {}, None, 5)

        assert exc_info.value.status == 401
        assert exc_info.value.message == "Invalid email or password"

    @responses.activate
    def test_5xx_raises_server_fault(self):
        """Test server errors."""
        responses.add(responses.GET, f"{API_URL}/api/runs", body="oops", status=500)

        with pytest.raises(ServerFault):
            self.client._send("GET", "/api/runs", None, None, 5)

    @responses.activate
    def test_connection_error_raises_network_error(self):
        """Test connection failure."""
        responses.add(
            responses.GET,
            f"{API_URL}/api/runs",
            body=requests.exceptions.ConnectionError("Connection refused"),
        )

        with pytest.raises(NetworkError, match="Cannot connect"):
            self.client._send("GET", "/api/runs", None, None, 5)

    @responses.activate
    def test_timeout_raises_network_error(self):
        """Test timeout."""
        responses.add(
            responses.GET,
            f"{API_URL}/api/runs",
            body=requests.exceptions.Timeout("slow"),
        )

        with pytest.raises(NetworkError, match="timed out"):
            self.client._send("GET", "/api/runs", None, None, 5)

    @pytest.mark.asyncio
    async def test_request_runs_off_loop(self):
        """Test the async API returns the decoded body."""
        with responses.RequestsMock() as rsps:
            rsps.add(responses.GET, f"{API_URL}/api/macro-targets", json={"calories": 2000})

            result = await self.client.request("get", "/api/macro-targets")

        assert result == {"calories": 2000}

    @pytest.mark.asyncio
    async def test_request_propagates_errors(self):
        """Test async errors surface unchanged."""
        with responses.RequestsMock() as rsps:
            rsps.add(responses.POST, f"{API_URL}/api/routines", status=400, json={"message": "bad"})

            with pytest.raises(ServerRejection, match="bad"):
                await self.client.request("POST", "/api/routines", data={"name": "x"})
