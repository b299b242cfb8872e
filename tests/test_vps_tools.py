"""Tests for the VPS tool handlers through the dispatcher."""

import pytest

from app.infra.error_handler import InvalidArgumentsError, UpstreamError

EXPECTED_TOOLS = ["vps_run_command", "vps_list_dir", "vps_read_file", "vps_write_file"]


def only_text(result):
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    return result.content[0].text


class TestVpsTools:
    """Test rendering and endpoint routing of the four VPS tools."""

    def test_catalog(self, registry):
        tools = registry.list_tools()

        assert [t["name"] for t in tools] == EXPECTED_TOOLS
        write_schema = tools[3]["inputSchema"]
        assert write_schema["required"] == ["path", "content"]
        assert all(p["type"] == "string" for p in write_schema["properties"].values())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name, arguments, endpoint, subject", [
        ("vps_run_command", {"cmd": "uname -a"}, "/run", "uname -a"),
        ("vps_list_dir", {"path": "/srv"}, "/ls", "/srv"),
        ("vps_read_file", {"path": "/etc/hosts"}, "/read", "/etc/hosts"),
        ("vps_write_file", {"path": "/tmp/a", "content": "x"}, "/write", "/tmp/a"),
    ])
    async def test_every_tool_renders_subject_and_streams(
        self, registry, backend, tool_name, arguments, endpoint, subject
    ):
        backend.respond(endpoint, json_body={"success": True, "stdout": "", "stderr": ""})

        text = only_text(await registry.dispatch(tool_name, arguments))

        assert subject in text
        assert "STDOUT:\n[empty]" in text
        assert "STDERR:\n[empty]" in text
        assert backend.requests[0].url.path == endpoint
        assert backend.last_body() == arguments

    @pytest.mark.asyncio
    async def test_run_command(self, registry, backend):
        backend.respond("/run", json_body={"stdout": "Linux\n", "stderr": "warn"})

        text = only_text(await registry.dispatch("vps_run_command", {"cmd": "uname"}))

        assert text == "CMD: uname\n\nSTDOUT:\nLinux\n\n\nSTDERR:\nwarn"

    @pytest.mark.asyncio
    async def test_run_command_missing_fields(self, registry, backend):
        backend.respond("/run", json_body={})

        text = only_text(await registry.dispatch("vps_run_command", {"cmd": "true"}))

        assert text == "CMD: true\n\nSTDOUT:\n[empty]\n\nSTDERR:\n[empty]"

    @pytest.mark.asyncio
    async def test_list_dir(self, registry, backend):
        backend.respond("/ls", json_body={"files": [
            {"name": "etc", "type": "dir"},
            {"name": "notes.txt", "type": "file"},
        ]})

        text = only_text(await registry.dispatch("vps_list_dir", {"path": "/"}))

        assert text.startswith("Listing: /\n\n[DIR]  etc\n       notes.txt\n\n")

    @pytest.mark.asyncio
    async def test_list_dir_empty(self, registry, backend):
        backend.respond("/ls", json_body={"files": []})

        text = only_text(await registry.dispatch("vps_list_dir", {"path": "/empty"}))

        assert text.startswith("Listing: /empty\n\n[empty]\n\n")

    @pytest.mark.asyncio
    async def test_read_file(self, registry, backend):
        backend.respond("/read", json_body={"content": "127.0.0.1 localhost"})

        text = only_text(await registry.dispatch("vps_read_file", {"path": "/etc/hosts"}))

        assert text.startswith("File: /etc/hosts\n\n127.0.0.1 localhost\n\n")

    @pytest.mark.asyncio
    async def test_read_file_without_content(self, registry, backend):
        backend.respond("/read", json_body={})

        text = only_text(await registry.dispatch("vps_read_file", {"path": "/empty"}))

        assert text.startswith("File: /empty\n\n\n\nSTDOUT:")

    @pytest.mark.asyncio
    async def test_write_file_end_to_end(self, registry, backend):
        backend.respond("/write", json_body={"success": True, "stdout": "ok"})

        text = only_text(await registry.dispatch("vps_write_file", {"path": "/tmp/a", "content": "x"}))

        assert "Status: success" in text
        assert "STDOUT:\nok" in text
        assert "STDERR:\n[empty]" in text
        assert backend.last_body() == {"path": "/tmp/a", "content": "x"}

    @pytest.mark.asyncio
    async def test_write_file_allows_empty_content(self, registry, backend):
        await registry.dispatch("vps_write_file", {"path": "/tmp/empty", "content": ""})

        assert backend.last_body() == {"path": "/tmp/empty", "content": ""}

    @pytest.mark.asyncio
    async def test_missing_path_fails_before_network(self, registry, backend):
        with pytest.raises(InvalidArgumentsError):
            await registry.dispatch("vps_read_file", {})

        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_empty_command_rejected(self, registry, backend):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            await registry.dispatch("vps_run_command", {"cmd": ""})

        assert exc_info.value.parameter == "cmd"
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_backend_failure_surfaces(self, registry, backend):
        backend.respond("/write", json_body={"success": False, "stderr": "permission denied"})

        with pytest.raises(UpstreamError) as exc_info:
            await registry.dispatch("vps_write_file", {"path": "/root/x", "content": "x"})

        assert exc_info.value.message == "permission denied"
