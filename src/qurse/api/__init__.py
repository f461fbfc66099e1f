"""FastAPI application exposing the Qurse services."""
