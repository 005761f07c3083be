"""FastAPI dependencies for injection."""
from fastapi import Request

from core.config import Settings
from db.session import get_async_session

__all__ = [
    "get_app_settings",
    "get_async_session",
]


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings
