import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

STORE_BACKENDS = ("memory", "firestore", "rest")


@dataclass
class Settings:
    """Runtime settings for the feed service"""
    store_backend: str = "memory"
    firebase_credentials: str = "./firebase.json"
    rest_url: Optional[str] = None
    rest_key: Optional[str] = None
    rest_timeout: Optional[float] = None
    allowed_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment, reading a .env file first if present

        Raises:
            ValueError: If FEED_STORE_BACKEND names an unknown backend
        """
        load_dotenv()

        backend = os.environ.get("FEED_STORE_BACKEND", "memory").strip().lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"Unknown store backend '{backend}', expected one of {', '.join(STORE_BACKENDS)}")

        timeout = os.environ.get("FEED_REST_TIMEOUT")
        origins = os.environ.get("FEED_ALLOWED_ORIGINS", "http://localhost:3000")

        return cls(
            store_backend=backend,
            firebase_credentials=os.environ.get("FIREBASE_CREDENTIALS", "./firebase.json"),
            rest_url=os.environ.get("FEED_REST_URL"),
            rest_key=os.environ.get("FEED_REST_KEY"),
            rest_timeout=float(timeout) if timeout else None,
            allowed_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
