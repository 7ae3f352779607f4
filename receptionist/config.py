"""Centralized configuration for the Nexus AI Receptionist.

Secret resolution order (per variable):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (when ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/nexus-receptionist/<VARIABLE_NAME>``.

Secrets are resolved lazily (see :func:`get_anthropic_api_key`) so that a
missing key surfaces as a model-invocation failure instead of breaking the
import of every module.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ── Feature flag: running on AWS? ────────────────────────────────────
_ON_AWS = bool(os.getenv("AWS_EXECUTION_ENV"))


# ── Secret resolution ────────────────────────────────────────────────

def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store.

    Returns ``None`` if the parameter does not exist or boto3 is
    unavailable.  Errors are logged but never raised so that local-dev
    fallback still works.
    """
    try:
        import boto3  # noqa: PLC0415 (lazy import, only needed on AWS)

        ssm = boto3.client("ssm")
        resp = ssm.get_parameter(Name=f"/nexus-receptionist/{name}", WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s failed (expected locally)", name)
        return None


def _require_env(name: str) -> str:
    """Return a config value from env-var or SSM, or raise a clear error."""
    value = os.getenv(name)
    if value and not value.startswith("your_"):
        return value

    if _ON_AWS:
        ssm_value = _get_ssm_parameter(name)
        if ssm_value:
            return ssm_value

    raise OSError(
        f"Missing required configuration: {name}. "
        f"Set it in .env (local) or SSM Parameter Store /nexus-receptionist/{name} (AWS)."
    )


def get_anthropic_api_key() -> str:
    """Resolve the Anthropic API key at call time."""
    return _require_env("ANTHROPIC_API_KEY")


# ── LLM ─────────────────────────────────────────────────────────────
MODEL_NAME: str = os.getenv("MODEL_NAME", "claude-sonnet-4-5")
MODEL_TEMPERATURE: float = float(os.getenv("MODEL_TEMPERATURE", "0.1"))
MODEL_MAX_TOKENS: int = int(os.getenv("MODEL_MAX_TOKENS", "1024"))

# ── Domain store ────────────────────────────────────────────────────
# memory | file | s3
STORE_BACKEND: str = os.getenv("STORE_BACKEND", "memory").lower()
STORE_PATH: str = os.getenv("STORE_PATH", ".nexus_store")
STORE_S3_BUCKET: str = os.getenv("STORE_S3_BUCKET", "")
STORE_KEY_PREFIX: str = os.getenv("STORE_KEY_PREFIX", "nexus_db_")
# Shared obfuscation secret. Not a cryptographic key.
STORE_SECRET: str = os.getenv("STORE_SECRET", "NEXUS_SAAS_DEMO_KEY_DO_NOT_USE_IN_PROD")

# ── Knowledge indexing ──────────────────────────────────────────────
INDEXING_DELAY_SECONDS: float = float(os.getenv("INDEXING_DELAY_SECONDS", "2.0"))

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
CORS_ORIGINS: list[str] = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")
