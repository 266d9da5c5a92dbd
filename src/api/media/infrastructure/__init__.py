"""Infrastructure adapters for the Media bounded context."""
