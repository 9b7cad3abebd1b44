"""FastAPI webhook surface for the skill."""
