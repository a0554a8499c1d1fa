"""SOP Studio: LLM-assisted Standard Operating Procedures and persona role-play."""

__version__ = "0.1.0"
