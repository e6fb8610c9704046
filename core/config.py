# =============================================================================
# core/config.py  -  Process configuration and call-time credentials
# =============================================================================
#
# Non-secret settings (model name, timeouts, output directory, logging) are
# read once when Settings() is built.  Credentials are NOT: a handler asks
# for them with Settings.require() at the moment it needs them, so a missing
# key fails that one call with a ConfigurationError instead of stopping the
# server at start-up.
#
# main.py calls load_dotenv() before Settings() is created, so values from a
# local .env file land in os.environ first.
# =============================================================================

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from core.errors import ConfigurationError

# Credential names, one per external provider.
GEMINI_API_KEY = "GEMINI_API_KEY"
ELEVENLABS_API_KEY = "ELEVENLABS_API_KEY"
HUGGINGFACE_API_KEY = "HUGGINGFACE_API_KEY"


@dataclass
class Settings:
    """Configuration shared by every tool in an adapter process."""

    # Live mapping, consulted on every require() call.  Tests pass a dict.
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)

    gemini_model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-1.5-pro"))
    provider_timeout: float = field(
        default_factory=lambda: float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "120"))
    )
    output_dir: Path = field(
        default_factory=lambda: Path(os.getenv("CONTENT_OUTPUT_DIR", tempfile.gettempdir()))
    )

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "info"))
    log_file: Path = field(
        default_factory=lambda: Path(os.getenv("LOG_FILE", "logs/content-creator.log"))
    )

    def require(self, name: str, hint: str = "") -> str:
        """Return credential ``name`` or raise ConfigurationError."""
        value = self.environ.get(name, "")
        if not value:
            message = f"{name} not found"
            if hint:
                message = f"{message}. {hint}"
            raise ConfigurationError(message, {"credential": name})
        return value

    def artifact_path(self, prefix: str, trace_id: str, extension: str) -> Path:
        """Where a generated file for this call goes, e.g. voiceover-<trace>.mp3."""
        return self.output_dir / f"{prefix}-{trace_id}.{extension}"
