from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv


def pytest_configure() -> None:
    """Load .env for integration runs without overriding existing env vars."""
    repo_root = Path(__file__).resolve().parents[1]
    load_dotenv(repo_root / ".env", override=False)
