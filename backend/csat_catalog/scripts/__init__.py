"""Maintenance commands (installed as csat-* console scripts)."""
