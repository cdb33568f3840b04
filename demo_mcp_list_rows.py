# demo_mcp_list_rows.py
# Version: v1
#
# Demo: call the coda_list_rows tool function and print the markdown view.
#
# Usage:
#
#   export CODA_API_KEY=...
#   export CODA_TEST_DOC=AbCDeFGH
#   export CODA_TEST_TABLE="Tasks"
#   python demo_mcp_list_rows.py

import asyncio
import os

from coda_mcp.auth import credentials_from_env
from coda_mcp.client import CodaClient
from coda_mcp.tools import rows

TEST_DOC = os.environ.get("CODA_TEST_DOC", "")
TEST_TABLE = os.environ.get("CODA_TEST_TABLE", "")
TEST_LIMIT = int(os.environ.get("CODA_TEST_LIMIT", "5"))


async def main() -> None:
    print("Calling MCP tool: coda_list_rows")
    print(f"Doc id:   {TEST_DOC}")
    print(f"Table:    {TEST_TABLE}")
    print(f"Limit:    {TEST_LIMIT}")
    print()

    client = CodaClient(credentials_from_env())
    result = await rows.list_rows(client, TEST_DOC, TEST_TABLE, limit=TEST_LIMIT, fmt="markdown")

    if result.isError:
        print("Tool returned an error:")
    print(result.content[0].text)


if __name__ == "__main__":
    asyncio.run(main())
