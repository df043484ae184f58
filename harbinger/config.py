"""Global configuration: loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class HarbingerSettings(BaseSettings):
    # Identity of the agent this process thinks for
    agent_id: str = "unknown"
    agent_name: str = "AGENT"
    agent_type: str = "general"

    # Autonomous engine
    autonomous_thinking: bool = False  # start the engine on server boot
    engine_mode: str = "local"  # "local" (profile scan + ring buffer) or "remote" (coordinator API)
    interval_ms: int = 60_000
    max_thoughts: int = 200

    # Coordinator API (remote mode)
    api_base: str = "http://localhost:8080"
    api_token: str = ""
    http_timeout_seconds: float = 10.0

    # Agent profiles (local mode)
    agents_dir: Path = Path("agents")

    log_level: str = "INFO"
    dashboard_host: str = "127.0.0.1"
    dashboard_port: int = 8421

    model_config = {"env_prefix": "HARBINGER_"}


settings = HarbingerSettings()
