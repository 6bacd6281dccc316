"""IAM API client implementations.

Contains the request executor (retries, deadlines, JSON envelope) and the
group client built on top of it.
"""
