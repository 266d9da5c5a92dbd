"""iam.dependencies package."""
