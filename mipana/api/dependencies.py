"""FastAPI dependency injection helpers."""

from functools import lru_cache

from mipana.config import settings
from mipana.infrastructure.database import async_session_factory
from mipana.tools.dispatcher import ToolDispatcher, create_dispatcher


@lru_cache
def get_dispatcher() -> ToolDispatcher:
    """Process-wide dispatcher, so the exchange-rate cache is shared."""
    return create_dispatcher(settings, async_session_factory)
