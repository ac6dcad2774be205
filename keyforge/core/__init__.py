"""Core key material engines."""
