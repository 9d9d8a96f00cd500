"""Core pipeline components for Linda."""
