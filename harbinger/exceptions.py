"""Custom exception hierarchy for harbinger."""


class HarbingerError(Exception):
    """Base for all harbinger errors."""


class EngineStateError(HarbingerError):
    """Invalid engine configuration or lifecycle request."""


class AgentProfileError(HarbingerError):
    """An agent profile directory could not be parsed."""
