"""Core domain types, configuration, and logging helpers."""
