"""EchoTrail - Context-aware adaptive storytelling core."""

__version__ = "0.1.0"
