"""iam.domain package."""
