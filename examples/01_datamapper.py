"""
Example 01: Data mapper against PostgreSQL

Expects a database that already defines the stored functions
(get_user_by_email, get_user_collections, ...) and the connection settings
in ARTMAPPER_* environment variables, e.g.:

    ARTMAPPER_HOST=localhost ARTMAPPER_DATABASE=gallery \
    ARTMAPPER_USER=gallery ARTMAPPER_PASSWORD=secret \
    python examples/01_datamapper.py ada@example.com 42
"""

import asyncio
import logging
import sys

from artmapper import LoginInfo, create_datamapper


async def main(email: str, user_id: int) -> None:
    mapper = create_datamapper()

    try:
        print("1. Look up a user by email:")
        error, user = await mapper.get_user_by_email(LoginInfo(email=email, password=""))
        if error:
            print(f"   {error.status_code}: {error.message}\n")
        else:
            print(f"   #{user.id} {user.nickname}\n")

        print("2. Public profile:")
        result = await mapper.get_profil_public(user_id)
        print(f"   {result.data if result.ok else result.error!r}\n")

        print("3. Collections with their artworks:")
        error, collections = await mapper.get_collections(user_id)
        if error:
            print(f"   {error.status_code}: {error.message}")
        for collection in collections or []:
            titles = ", ".join(a.title or str(a.id) for a in collection.artworks)
            print(f"   - {collection.title}: {titles or '(empty)'}")
    finally:
        await mapper.engine.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main(sys.argv[1], int(sys.argv[2])))
