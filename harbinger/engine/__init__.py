"""Autonomous engine: continuous context evaluation for agents.

- AutonomousEngine: timer-driven think cycles with failure isolation
- EnhancementIdentifier: five-dimension candidate detection
- calculate_efficiency / classify_automation: scoring and classification
- ContextSource / EnhancementSink: pluggable remote or local collaborators
- EngineRegistry: holds at most one running engine per process
"""
