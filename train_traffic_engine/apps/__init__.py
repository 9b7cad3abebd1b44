"""Application surfaces exposing the skill."""
