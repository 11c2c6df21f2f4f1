"""FastAPI dependency returning the shared database client."""
from typing import Any

from fastapi import Request


def get_db(request: Request) -> Any:
    return request.app.state.db
