"""Core authentication, security and error modules."""
