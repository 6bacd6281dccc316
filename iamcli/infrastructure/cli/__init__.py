"""Console output implementations."""
