"""Application services for IAM resources."""
