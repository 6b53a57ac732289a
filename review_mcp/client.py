"""Simple MCP client for trying the code-reviewer-mcp server."""
import argparse
import asyncio
import json
import os
from pathlib import Path

from dotenv import dotenv_values
from fastmcp import Client
from fastmcp.client.transports import PythonStdioTransport

_here = Path(__file__).parent
_ENV_KEYS = (
    "GITHUB_PAT",
    "GITHUB_TOKEN",
    "OPENROUTER_API_KEY",
    "REVIEW_MODEL",
    "MAX_DIFF_CHARS",
    "LOG_LEVEL",
)


def _server_env() -> dict[str, str]:
    env = {k: v for k, v in dotenv_values(".env").items() if v}
    for key in _ENV_KEYS:
        if key in os.environ:
            env[key] = os.environ[key]
    return env


async def cmd_tools() -> None:
    transport = PythonStdioTransport(script_path=_here / "server.py", env=_server_env())
    async with Client(transport) as client:
        for tool in await client.list_tools():
            print(f"{tool.name}: {tool.description}")


async def cmd_review(owner: str, repo: str, pull_number: int) -> None:
    transport = PythonStdioTransport(script_path=_here / "server.py", env=_server_env())
    async with Client(transport) as client:
        result = await client.call_tool("review_pull_request", {
            "owner": owner,
            "repo": repo,
            "pull_number": pull_number,
        })
        review = json.loads(result.content[0].text)

    if review.get("partial"):
        print("(diff was too large, review covers changed lines only)\n")
    print(review["review"]["body"])
    print()
    for c in review["review"]["comments"]:
        where = f"{c['start_line']}-{c['line']}" if "start_line" in c else str(c["line"])
        print(f"{c['path']}:{where}")
        print(f"  {c['body']}")


def main() -> None:
    parser = argparse.ArgumentParser(description="code-reviewer-mcp client")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("tools", help="List the tools the server exposes")

    r = sub.add_parser("review", help="Review a pull request")
    r.add_argument("owner", help="Repository owner")
    r.add_argument("repo", help="Repository name")
    r.add_argument("pull_number", type=int, help="Pull request number")

    args = parser.parse_args()

    if args.cmd == "tools":
        asyncio.run(cmd_tools())
    else:
        asyncio.run(cmd_review(args.owner, args.repo, args.pull_number))


if __name__ == "__main__":
    main()
