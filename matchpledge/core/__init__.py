"""Core infrastructure utilities for database and settings."""

from .db import AsyncSessionLocal, create_schema, engine, get_session
from .settings import settings
