"""API Resilience Implementations.

Contains the building blocks for resilient API calls: call contexts with
cancellation and deadlines, outcome classification, exponential backoff, and
per-category timeouts.
Bounded Context: API Resilience
"""
