"""iam.application package."""
