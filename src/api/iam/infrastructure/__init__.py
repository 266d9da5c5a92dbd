"""iam.infrastructure package."""
