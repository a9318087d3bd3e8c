"""Configuration management for VoxTube.

Loads configuration from ~/.config/voxtube/config.toml.
Priority chain: env vars > config file > defaults.
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "voxtube"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# VoxTube configuration

[server]
# Bind address: "127.0.0.1" = localhost only, "0.0.0.0" = allow LAN access
host = "127.0.0.1"
port = 3000

# Directory with the web UI, served at "/" when set
static_dir = ""

[cache]
# Directory where audio and summaries are cached
dir = "./cache"

# Artifacts older than this are treated as absent and deleted
ttl_days = 7

# Period between background eviction passes
cleanup_interval_hours = 12

[tts]
# Kokoro server (OpenAI-compatible /v1/audio/speech endpoint)
kokoro_url = "http://localhost:8880"
timeout_seconds = 120

[youtube]
# CLI that prints a transcript: <yt_cli_path> <videoId> --format text
yt_cli_path = "yt"
max_transcript_length = 50000
timeout_seconds = 60

[llm]
# Provider: "openai_compat" (HTTP), "claude_cli", "codex"
provider = "openai_compat"
base_url = "https://api.openai.com/v1"
model = "gpt-4o-mini"
timeout_ms = 120000
claude_cli_path = "claude"
codex_cli_path = "codex"

# API keys are read from environment variables, not this file:
#   LLM_API_KEY  - openai_compat provider
"""


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 3000
    static_dir: str = ""


@dataclass(frozen=True)
class CacheConfig:
    """Artifact cache configuration."""

    dir: Path = Path("./cache")
    ttl_days: float = 7
    cleanup_interval_hours: float = 12

    @property
    def ttl_seconds(self) -> float:
        return self.ttl_days * 24 * 60 * 60


@dataclass(frozen=True)
class TTSConfig:
    """Kokoro TTS server configuration."""

    kokoro_url: str = "http://localhost:8880"
    timeout_seconds: float = 120


@dataclass(frozen=True)
class YouTubeConfig:
    """Transcript source configuration."""

    yt_cli_path: str = "yt"
    max_transcript_length: int = 50000
    timeout_seconds: float = 60


@dataclass(frozen=True)
class LLMConfig:
    """Summarizer provider configuration."""

    provider: str = "openai_compat"
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    api_key: str | None = None
    timeout_ms: int = 120000
    claude_cli_path: str = "claude"
    codex_cli_path: str = "codex"


@dataclass(frozen=True)
class VoxTubeConfig:
    """Top-level VoxTube configuration."""

    server: ServerConfig = ServerConfig()
    cache: CacheConfig = CacheConfig()
    tts: TTSConfig = TTSConfig()
    youtube: YouTubeConfig = YouTubeConfig()
    llm: LLMConfig = LLMConfig()


_cached_config: VoxTubeConfig | None = None


def generate_config(path: Path = CONFIG_PATH) -> Path:
    """Generate default config file at ~/.config/voxtube/config.toml."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _number(name: str, value: Any, cast: type, positive: bool = False) -> Any:
    """Coerce a config value, naming the offending option on failure."""
    try:
        result = cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}", e) from e
    if positive and result <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return result


def parse_config(data: dict[str, Any], env: dict[str, str] | None = None) -> VoxTubeConfig:
    """Build a VoxTubeConfig from parsed TOML data and environment overrides.

    Args:
        data: Parsed TOML document (may be empty)
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated VoxTubeConfig

    Raises:
        ConfigError: If a numeric option is malformed or out of range
    """
    env = dict(os.environ) if env is None else env

    server = data.get("server", {})
    cache = data.get("cache", {})
    tts = data.get("tts", {})
    youtube = data.get("youtube", {})
    llm = data.get("llm", {})

    defaults = VoxTubeConfig()

    return VoxTubeConfig(
        server=ServerConfig(
            host=env.get("VOXTUBE_HOST", server.get("host", defaults.server.host)),
            port=_number(
                "server.port", env.get("PORT", server.get("port", defaults.server.port)), int
            ),
            static_dir=env.get(
                "VOXTUBE_STATIC_DIR", server.get("static_dir", defaults.server.static_dir)
            ),
        ),
        cache=CacheConfig(
            dir=Path(env.get("CACHE_DIR", cache.get("dir", str(defaults.cache.dir)))),
            ttl_days=_number(
                "cache.ttl_days",
                env.get("CACHE_TTL_DAYS", cache.get("ttl_days", defaults.cache.ttl_days)),
                float,
                positive=True,
            ),
            cleanup_interval_hours=_number(
                "cache.cleanup_interval_hours",
                env.get(
                    "CLEANUP_INTERVAL_HOURS",
                    cache.get("cleanup_interval_hours", defaults.cache.cleanup_interval_hours),
                ),
                float,
                positive=True,
            ),
        ),
        tts=TTSConfig(
            kokoro_url=env.get("KOKORO_URL", tts.get("kokoro_url", defaults.tts.kokoro_url)),
            timeout_seconds=_number(
                "tts.timeout_seconds",
                env.get("KOKORO_TIMEOUT", tts.get("timeout_seconds", defaults.tts.timeout_seconds)),
                float,
                positive=True,
            ),
        ),
        youtube=YouTubeConfig(
            yt_cli_path=env.get(
                "YT_CLI_PATH", youtube.get("yt_cli_path", defaults.youtube.yt_cli_path)
            ),
            max_transcript_length=_number(
                "youtube.max_transcript_length",
                env.get(
                    "MAX_TRANSCRIPT_LENGTH",
                    youtube.get("max_transcript_length", defaults.youtube.max_transcript_length),
                ),
                int,
                positive=True,
            ),
            timeout_seconds=_number(
                "youtube.timeout_seconds",
                env.get("YT_TIMEOUT", youtube.get("timeout_seconds", defaults.youtube.timeout_seconds)),
                float,
                positive=True,
            ),
        ),
        llm=LLMConfig(
            provider=env.get("LLM_PROVIDER", llm.get("provider", defaults.llm.provider)),
            base_url=env.get("LLM_BASE_URL", llm.get("base_url", defaults.llm.base_url)),
            model=env.get("LLM_MODEL", llm.get("model", defaults.llm.model)),
            api_key=env.get("LLM_API_KEY") or None,
            timeout_ms=_number(
                "llm.timeout_ms",
                env.get("LLM_TIMEOUT_MS", llm.get("timeout_ms", defaults.llm.timeout_ms)),
                int,
                positive=True,
            ),
            claude_cli_path=env.get(
                "CLAUDE_CLI_PATH", llm.get("claude_cli_path", defaults.llm.claude_cli_path)
            ),
            codex_cli_path=env.get(
                "CODEX_CLI_PATH", llm.get("codex_cli_path", defaults.llm.codex_cli_path)
            ),
        ),
    )


def load_config(path: Path | None = None) -> VoxTubeConfig:
    """Load configuration from config file with env var overrides.

    On first run, generates the config file and continues with defaults.

    Args:
        path: Config file to read (defaults to ~/.config/voxtube/config.toml)

    Returns:
        Loaded and validated VoxTubeConfig.

    Raises:
        ConfigError: If the file is not valid TOML or a value is invalid.
    """
    global _cached_config
    if _cached_config is not None and path is None:
        return _cached_config

    config_path = path or CONFIG_PATH

    if not config_path.exists():
        try:
            generate_config(config_path)
            logger.info(f"No config found. Generated {config_path} with defaults")
        except OSError as e:
            logger.warning(f"Could not write default config to {config_path}: {e}")
        data: dict[str, Any] = {}
    else:
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}", e) from e

    config = parse_config(data)
    if path is None:
        _cached_config = config
    return config
