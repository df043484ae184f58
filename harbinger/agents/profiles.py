"""Agent profile discovery: reads agent directories from disk.

Each agent lives in its own directory under the agents root:

    agents/
      recon/
        IDENTITY.md    Name, codename, role, specialization
        CONFIG.yaml    Runtime settings
        SOUL.md        System prompt
        SKILLS.md
        TOOLS.md
        HEARTBEAT.md

Directories named in SKIP_DIRS (and hidden ones) are not agents.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from harbinger.engine.models import AgentRecord
from harbinger.exceptions import AgentProfileError

_logger = logging.getLogger(__name__)

SKIP_DIRS = {"shared", "_template", "node_modules"}

_IDENTITY_FIELDS = ("name", "codename", "role", "specialization")
_TITLE_RE = re.compile(r"^#\s+(\w+)\s+[—–-]\s+(.+)", re.MULTILINE)


class AgentProfile(BaseModel):
    """Everything known about one agent from its profile directory."""

    id: str
    name: str = ""
    codename: str = ""
    role: str = ""
    specialization: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    soul: str = ""
    skills: str = ""
    tools: str = ""
    heartbeat: str = ""

    @property
    def display_name(self) -> str:
        return self.codename or self.name or self.id

    def to_record(self) -> AgentRecord:
        return AgentRecord(
            id=self.id,
            name=self.display_name,
            status=str(self.config.get("status", "available")),
        )


def _field_pattern(field: str) -> re.Pattern[str]:
    # Value runs until the next "<Field>" sentence, a newline, or the end.
    return re.compile(
        rf"(?<![a-z])\*{{0,2}}{field}\*{{0,2}}[:\s]+\s*(.+?)"
        r"(?=\s*\.\s*(?:Name|Codename|Role|Specialization)\b|\n|$)",
        re.IGNORECASE,
    )


_FIELD_PATTERNS = {field: _field_pattern(field) for field in _IDENTITY_FIELDS}


def parse_identity(content: str) -> dict[str, str]:
    """Parse IDENTITY.md into name/codename/role/specialization.

    Understands the single-line form ("Name: X. Codename: Y. Role: Z."),
    one field per line, bold markdown labels ("**Role:** Z") and, failing a
    codename, a "# CODENAME - Role" title.
    """
    identity: dict[str, str] = {}
    text = content.strip()

    for field, pattern in _FIELD_PATTERNS.items():
        match = pattern.search(text)
        if match:
            value = match.group(1).strip()
            value = re.sub(r"\.$", "", value)
            value = re.sub(r"^\*+\s*", "", value)
            value = re.sub(r"\s*\*+$", "", value)
            identity[field] = value

    if not identity.get("codename"):
        title = _TITLE_RE.search(text)
        if title:
            identity["codename"] = title.group(1).strip()
            identity.setdefault("role", title.group(2).strip())

    return identity


def parse_config(content: str, source: str = "CONFIG.yaml") -> dict[str, Any]:
    """Parse CONFIG.yaml. An empty file yields an empty mapping."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise AgentProfileError(f"Invalid YAML in {source}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise AgentProfileError(f"{source} must be a mapping, got {type(data).__name__}")
    return data


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8") if path.is_file() else ""


def load_agent_profile(agents_dir: Path, dir_name: str) -> AgentProfile | None:
    """Load one agent profile. Returns None if the directory does not exist."""
    agent_path = agents_dir / dir_name
    if not agent_path.is_dir():
        return None

    fields: dict[str, Any] = {"id": dir_name}

    identity = _read(agent_path / "IDENTITY.md")
    if identity:
        fields.update(parse_identity(identity))

    config_path = agent_path / "CONFIG.yaml"
    if config_path.is_file():
        fields["config"] = parse_config(_read(config_path), str(config_path))

    fields["soul"] = _read(agent_path / "SOUL.md")
    fields["skills"] = _read(agent_path / "SKILLS.md")
    fields["tools"] = _read(agent_path / "TOOLS.md")
    fields["heartbeat"] = _read(agent_path / "HEARTBEAT.md")

    return AgentProfile(**fields)


def discover_agents(agents_dir: Path) -> list[AgentProfile]:
    """Discover every agent profile under ``agents_dir``, sorted by id.

    A profile that fails to parse is logged and skipped.
    """
    if not agents_dir.is_dir():
        return []

    profiles = []
    for entry in sorted(agents_dir.iterdir()):
        if not entry.is_dir() or entry.name in SKIP_DIRS or entry.name.startswith("."):
            continue
        try:
            profile = load_agent_profile(agents_dir, entry.name)
        except (AgentProfileError, OSError) as e:
            _logger.warning("Skipping agent profile %s: %s", entry.name, e)
            continue
        if profile is not None:
            profiles.append(profile)
    return profiles


def describe_agents(profiles: list[AgentProfile]) -> str:
    """Bullet-list summary of agents, for prompt templates."""
    if not profiles:
        return "No agent profiles configured."
    return "\n".join(
        f"- **{p.display_name}**: {p.role or 'general'}" for p in profiles
    )
