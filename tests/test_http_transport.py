"""Integration tests for the HTTP carrier."""

import pytest
from fastapi.testclient import TestClient

from app.infra.error_handler import ErrorCode
from app.main import create_app


class TestHttpTransport:
    """Test POST /mcp and the auxiliary endpoints."""

    @pytest.fixture
    def client(self, registry):
        return TestClient(create_app(registry))

    def test_initialize(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "initialize"})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 1
        assert body["result"]["serverInfo"]["name"] == "vps-mcp-server"
        assert "X-Request-ID" in response.headers

    def test_tools_list(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 2, "method": "tools/list"})

        tools = response.json()["result"]["tools"]
        assert [t["name"] for t in tools] == [
            "vps_run_command", "vps_list_dir", "vps_read_file", "vps_write_file",
        ]
        assert tools[0]["inputSchema"]["properties"]["cmd"]["type"] == "string"

    def test_write_file_end_to_end(self, client, backend):
        backend.respond("/write", json_body={"success": True, "stdout": "ok"})

        response = client.post("/mcp", json={
            "jsonrpc": "2.0",
            "id": 3,
            "method": "tools/invoke",
            "params": {"name": "vps_write_file", "arguments": {"path": "/tmp/a", "content": "x"}},
        })

        assert response.status_code == 200
        text = response.json()["result"]["content"][0]["text"]
        assert "Status: success" in text
        assert "STDOUT:\nok" in text

    def test_tool_errors_are_rpc_errors(self, client, backend):
        backend.respond("/run", json_body={"success": False, "stderr": "boom"})

        response = client.post("/mcp", json={
            "jsonrpc": "2.0",
            "id": 4,
            "method": "tools/invoke",
            "params": {"name": "vps_run_command", "arguments": {"cmd": "false"}},
        })

        assert response.status_code == 200
        assert response.json()["error"] == {"code": int(ErrorCode.UPSTREAM_ERROR), "message": "boom"}

    def test_unparseable_body(self, client):
        response = client.post(
            "/mcp",
            content=b"{oops",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json()["error"]["code"] == ErrorCode.PARSE_ERROR

    def test_unknown_path(self, client):
        response = client.post("/rpc", json={"jsonrpc": "2.0", "id": 1, "method": "initialize"})

        assert response.status_code == 404

    def test_request_too_large(self, client):
        response = client.post(
            "/mcp",
            content=b"x",
            headers={"Content-Length": str(2 * 1024 * 1024)},
        )

        assert response.status_code == 413

    def test_health(self, client, backend):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert len(response.json()["tools"]) == 4
        assert backend.requests == []

    def test_metrics(self, client):
        client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "ping"})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "mcp_rpc_requests_total" in response.text

    def test_independent_app_instances(self, registry):
        """Each app holds its own registry; nothing is process-global."""
        from app.services.tool_registry import ToolRegistry

        empty_client = TestClient(create_app(ToolRegistry()))
        full_client = TestClient(create_app(registry))

        empty = empty_client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        full = full_client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})

        assert empty.json()["result"]["tools"] == []
        assert len(full.json()["result"]["tools"]) == 4
