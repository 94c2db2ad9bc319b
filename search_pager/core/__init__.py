"""Core pagination engine, settings and error taxonomy."""
