'''
This file contains the database configuration for the hotel reservation backend.
'''
from typing import Optional

from supabase import Client, create_client

from config import Settings
from exceptions import ConfigurationError


class HotelDB:
    """Database Client"""

    # private interface
    def __init__(self, settings: Settings):
        url: Optional[str] = settings.supabase_url
        key: Optional[str] = settings.supabase_key
        if url is None or key is None:
            raise ConfigurationError("Database URL or Key not found in environment variables.")
        self.client: Client = create_client(url, key)


if __name__ == "__main__":
    db_conn = HotelDB(Settings.from_env())

    _ = db_conn.client.table("rooms").select("*").execute()
    print(_)
