"""Linda - webhook-driven developer automation agent."""
__version__ = "0.1.0"
