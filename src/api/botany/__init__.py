"""Botany bounded context: plant recognition and the species catalog."""
