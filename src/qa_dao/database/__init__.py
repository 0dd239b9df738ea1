from .base import Base
from .session import create_engine, create_engine_from_settings, create_session_factory

__all__ = [
    "Base",
    "create_engine",
    "create_engine_from_settings",
    "create_session_factory",
]
