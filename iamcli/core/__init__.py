"""Core application layer.

Contains the application services and the command handler that orchestrate
domain logic and infrastructure components.
"""
