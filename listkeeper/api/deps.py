from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from listkeeper.app_shell.context import ServiceContext
from listkeeper.rules.loader import load_rules, rules_path_from_env
from listkeeper.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.rules_path: Path = rules_path_from_env()


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules(settings.rules_path)


# --- Context ---
@lru_cache
def _context_for(path: Path) -> ServiceContext:
    return ServiceContext.create(_load_rules(path))


def get_context(settings: Settings = Depends(get_settings)) -> ServiceContext:
    return _context_for(settings.rules_path)
