"""Media bounded context: image upload, storage and retrieval."""
