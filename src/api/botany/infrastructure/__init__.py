"""Infrastructure adapters for the Botany bounded context."""
