"""Configuration loading for the IAM CLI."""
