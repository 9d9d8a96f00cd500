"""REST clients for the remote services Linda talks to."""
