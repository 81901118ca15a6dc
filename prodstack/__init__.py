"""ProdStack: persona-driven PRD and user story generation."""

__version__ = "0.1.0"
