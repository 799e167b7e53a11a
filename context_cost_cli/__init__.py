"""Context cost CLI - cost estimation and context management for LLM chat documents."""

__version__ = "0.1.0"
