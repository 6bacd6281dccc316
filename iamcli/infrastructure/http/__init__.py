"""HTTP transport implementations."""
