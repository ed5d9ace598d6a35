"""Temporal integration: activities exposing each pipeline stage, and their worker."""
