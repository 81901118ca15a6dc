"""Core configuration, schemas and document pipeline."""
