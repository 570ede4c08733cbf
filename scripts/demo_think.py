#!/usr/bin/env python3
"""Spawn the Think MCP server and send it one think request, like Cursor would."""

import json
import os
import subprocess
import sys

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def main():
    prompt = " ".join(sys.argv[1:]) or "How does quicksort work?"

    print("🔍 Testing Think MCP server...")
    server = subprocess.Popen(
        [sys.executable, "-u", "-m", "think_mcp"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=sys.stderr,
        text=True,
        cwd=REPO_ROOT,
    )

    try:
        info = json.loads(server.stdout.readline())
        if info.get("method") != "mcp/server_info":
            print(f"❌ Unexpected first message: {info}")
            return 1

        print("✅ Server successfully initialized")
        print(f"Server name: {info['params']['name']}")
        print(f"Tools: {', '.join(tool['name'] for tool in info['params']['tools'])}")

        request = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "mcp/execute",
            "params": {"tool": "think", "arguments": {"prompt": prompt}}
        }
        server.stdin.write(json.dumps(request) + "\n")
        server.stdin.flush()

        response = json.loads(server.stdout.readline())
        if "result" not in response:
            print(f"❌ Error response: {response.get('error')}")
            return 1

        print("✅ Server successfully responded to think request")
        print("\nOutput:")
        print("-------")
        print(response["result"]["output"])
        print("-------\n")
        return 0
    finally:
        server.stdin.close()
        server.wait(timeout=10)


if __name__ == "__main__":
    sys.exit(main())
