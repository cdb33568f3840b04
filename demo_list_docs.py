# demo_list_docs.py
# Version: v1

r"""
Quick smoke test: list the Coda docs visible to an API key.

Run with virtualenv active and the key exported:
  export CODA_API_KEY=...
  python demo_list_docs.py
"""

import asyncio

from coda_mcp.auth import credentials_from_env
from coda_mcp.client import CodaClient


async def main() -> None:
    client = CodaClient(credentials_from_env())

    status = await client.test_connection()
    print(status["message"])
    if not status["connected"]:
        return

    page = await client.list_docs(limit=10)
    print("Docs returned:", len(page.items), "(more available)" if page.has_more else "")

    for doc in page.items:
        print(f"- {doc.get('name')} (id={doc.get('id')})")


if __name__ == "__main__":
    asyncio.run(main())
