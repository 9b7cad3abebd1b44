"""Application services: response building, routing, and the skill handlers."""
