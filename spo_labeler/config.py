"""
Configuration loading.
Values come from config.json (optional) and are overridden by environment
variables, which may themselves be provided through a .env file.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_AUTHORITY = "https://login.microsoftonline.com/organizations"
DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/beta"


def _as_bool(value, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "y", "on")


@dataclass
class AppConfig:
    client_id: str
    authority: str = DEFAULT_AUTHORITY
    token_cache_path: str = "token_cache.bin"
    graph_base_url: str = DEFAULT_GRAPH_BASE_URL
    http_timeout: int = 30
    library: str = "Documents"
    verify_assignment: bool = False

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> AppConfig:
        """Read config.json (when present) and apply environment overrides."""
        load_dotenv()

        config: dict = {}
        if config_path is None:
            here = os.path.dirname(__file__)
            config_path = os.path.abspath(os.path.join(here, "..", "config.json"))
        if os.path.exists(config_path):
            with open(config_path, "r", encoding="utf-8") as fh:
                config = json.load(fh)

        client_id = os.getenv("CLIENT_ID") or config.get("client_id")
        if not client_id:
            raise ValueError("CLIENT_ID must be set via environment or config.json")

        # If AUTHORITY isn't explicitly set, prefer building it from TENANT_ID if available
        tenant_id = os.getenv("TENANT_ID") or config.get("tenant_id")
        authority = os.getenv("AUTHORITY") or config.get("authority")
        if not authority:
            authority = f"https://login.microsoftonline.com/{tenant_id}" if tenant_id else DEFAULT_AUTHORITY

        return cls(
            client_id=client_id,
            authority=authority,
            token_cache_path=os.getenv("TOKEN_CACHE_PATH") or config.get("token_cache_path", "token_cache.bin"),
            graph_base_url=(os.getenv("GRAPH_BASE_URL") or config.get("graph_base_url")
                            or DEFAULT_GRAPH_BASE_URL).rstrip("/"),
            http_timeout=int(os.getenv("HTTP_TIMEOUT") or config.get("http_timeout", 30)),
            library=config.get("library", "Documents"),
            verify_assignment=_as_bool(config.get("verify_assignment"), False),
        )
