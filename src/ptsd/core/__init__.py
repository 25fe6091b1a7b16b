"""Core pipeline engine for ptsd."""
