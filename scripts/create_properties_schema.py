#!/usr/bin/env python3
"""Create the properties table and spatial index expected by the candidate query."""

import asyncio
import asyncpg
import sys

from staysearch.config import get_search_settings

SCHEMA_STATEMENTS = [
    "CREATE EXTENSION IF NOT EXISTS postgis",
    """
    CREATE TABLE IF NOT EXISTS properties (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        city TEXT,
        country TEXT,
        max_guests INTEGER,
        destination_id TEXT,
        location GEOGRAPHY(POINT, 4326) NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_properties_location ON properties USING GIST (location)",
    "CREATE INDEX IF NOT EXISTS idx_properties_max_guests ON properties (max_guests)",
]


async def create_schema():
    database_url = get_search_settings().database.url

    try:
        conn = await asyncpg.connect(database_url)
        try:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)
        finally:
            await conn.close()
        print('Properties schema created/verified')

    except (asyncpg.PostgresError, OSError) as e:
        print(f'Error: {e}')
        sys.exit(1)

if __name__ == '__main__':
    asyncio.run(create_schema())
