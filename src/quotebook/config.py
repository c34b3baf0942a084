"""Configuration management for quotebook.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

_TRUE = {"1", "true", "yes", "on"}

# Session cookie lifetimes Firebase accepts, in seconds
MIN_SESSION_MAX_AGE = 5 * 60
MAX_SESSION_MAX_AGE = 14 * 24 * 60 * 60


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


def _env_optional(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Identity provider
    owner_identity_id: Optional[str]
    firebase_credentials: Optional[Path]
    firebase_project_id: Optional[str]

    # Session cookie
    session_cookie_name: str
    session_max_age: int  # seconds
    session_secure: bool

    # Server
    host: str
    port: int

    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "QUOTEBOOK_DB_PATH",
            str(Path.home() / ".quotebook" / "quotebook.db"),
        )
        db_path = Path(db_path_str).expanduser() if db_path_str != ":memory:" else Path(db_path_str)

        credentials = _env_optional("QUOTEBOOK_FIREBASE_CREDENTIALS")

        return cls(
            db_path=db_path,
            owner_identity_id=_env_optional("QUOTEBOOK_OWNER_IDENTITY_ID"),
            firebase_credentials=Path(credentials).expanduser() if credentials else None,
            firebase_project_id=_env_optional("QUOTEBOOK_FIREBASE_PROJECT_ID"),
            session_cookie_name=os.environ.get("QUOTEBOOK_SESSION_COOKIE", "quotebook_session"),
            session_max_age=int(os.environ.get("QUOTEBOOK_SESSION_MAX_AGE", str(MAX_SESSION_MAX_AGE))),
            session_secure=_env_bool("QUOTEBOOK_SESSION_SECURE", True),
            host=os.environ.get("QUOTEBOOK_HOST", "127.0.0.1"),
            port=int(os.environ.get("QUOTEBOOK_PORT", "5000")),
            log_level=os.environ.get("QUOTEBOOK_LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if str(self.db_path) != ":memory:" and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if self.firebase_credentials and not self.firebase_credentials.exists():
            errors.append(f"Firebase credentials file not found: {self.firebase_credentials}")

        if not MIN_SESSION_MAX_AGE <= self.session_max_age <= MAX_SESSION_MAX_AGE:
            errors.append(
                f"QUOTEBOOK_SESSION_MAX_AGE must be between {MIN_SESSION_MAX_AGE} "
                f"and {MAX_SESSION_MAX_AGE} seconds"
            )

        return errors

    def has_firebase_config(self) -> bool:
        """Check if explicit Firebase configuration is present."""
        return bool(self.firebase_credentials or self.firebase_project_id)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
