"""
End-to-end tests: run the server as a subprocess over stdin/stdout pipes,
the way an editor does.
"""

import json
import os
import signal
import subprocess
import sys

import pytest

from conftest import REPO_ROOT, execute_request


def spawn_server(extra_env=None):
    env = dict(os.environ)
    env["PYTHONPATH"] = str(REPO_ROOT) + os.pathsep + env.get("PYTHONPATH", "")
    env.update(extra_env or {})
    return subprocess.Popen(
        [sys.executable, "-u", "-m", "think_mcp"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        env=env,
        cwd=str(REPO_ROOT),
    )


def exchange(lines, extra_env=None):
    """Send lines, close stdin, and return (exit code, stdout records)."""
    server = spawn_server(extra_env)
    stdout, _ = server.communicate(input="".join(line + "\n" for line in lines), timeout=30)
    records = [json.loads(line) for line in stdout.splitlines() if line.strip()]
    return server.returncode, records


def test_announcement_comes_first():
    code, records = exchange([])

    assert code == 0
    assert len(records) == 1
    assert records[0]["method"] == "mcp/server_info"
    assert [tool["name"] for tool in records[0]["params"]["tools"]] == ["think"]


def test_scenario_think_request():
    line = '{"jsonrpc":"2.0","id":"1","method":"mcp/execute","params":{"tool":"think","arguments":{"prompt":"How does quicksort work?"}}}'
    code, records = exchange([line])

    assert code == 0
    response = records[1]
    assert response["id"] == "1"
    output = response["result"]["output"]
    assert output.index("<thinking>") < output.index("How does quicksort work?") < output.index("</thinking>")


def test_scenario_missing_prompt():
    _, records = exchange([json.dumps(execute_request(arguments={}))])
    assert records[1]["error"]["code"] == -32602
    assert "Missing required parameter" in records[1]["error"]["message"]


def test_scenario_unknown_tool():
    _, records = exchange([json.dumps(execute_request(tool="unknown"))])
    assert records[1]["error"]["code"] == -32601
    assert 'Tool "unknown" not found' in records[1]["error"]["message"]


def test_scenario_html_prompt_is_escaped():
    _, records = exchange([json.dumps(execute_request("Is <div> an HTML tag?"))])
    output = records[1]["result"]["output"]
    assert "Is &lt;div&gt; an HTML tag?" in output
    assert "<div>" not in output


def test_malformed_line_then_valid_request():
    code, records = exchange(["this is not json", json.dumps(execute_request("still here", request_id=2))])

    assert code == 0
    assert len(records) == 2
    assert records[1]["id"] == 2


def test_debug_mode_writes_log_file(tmp_path):
    log_file = tmp_path / "think.log"
    code, records = exchange(
        [json.dumps(execute_request("logged"))],
        extra_env={"CLAUDE_THINK_DEBUG": "true", "CLAUDE_THINK_LOG_FILE": str(log_file)},
    )

    assert code == 0
    assert len(records) == 2
    content = log_file.read_text(encoding="utf-8")
    assert "Received request" in content
    assert "shutting down" in content


def test_version_flag():
    result = subprocess.run(
        [sys.executable, "-m", "think_mcp", "--version"],
        capture_output=True,
        text=True,
        cwd=str(REPO_ROOT),
        timeout=30,
    )
    assert result.returncode == 0
    assert result.stdout.strip() == "Cursor-Claud-Think-MCP 1.0.0"


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX signals")
@pytest.mark.parametrize("signum", [signal.SIGINT, signal.SIGTERM])
def test_signal_while_idle_exits_cleanly(signum):
    server = spawn_server()
    try:
        # Signal handlers are installed before the announcement is written
        assert json.loads(server.stdout.readline())["method"] == "mcp/server_info"
        server.send_signal(signum)
        code = server.wait(timeout=30)
        remaining = server.stdout.read()
    finally:
        if server.poll() is None:
            server.kill()
        server.stdin.close()
        server.stdout.close()
        server.stderr.close()

    assert code == 0
    assert remaining == ""
