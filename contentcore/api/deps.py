from functools import lru_cache

from fastapi import Depends

from contentcore.app_shell.config import Settings
from contentcore.app_shell.context import ServiceContext
from contentcore.rules.loader import load_rules
from contentcore.rules.models import Rules


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


# --- Context ---
_context_instance: ServiceContext | None = None


def get_context(settings: Settings = Depends(get_settings)) -> ServiceContext:
    """Get the service context singleton."""
    global _context_instance
    if _context_instance is None:
        _context_instance = ServiceContext.create(get_rules(), db_path=settings.db_path)
    return _context_instance
