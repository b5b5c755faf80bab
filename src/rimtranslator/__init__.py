"""rimtranslator: LLM-driven translation of RimWorld mod XML files."""

__version__ = "0.1.0"
