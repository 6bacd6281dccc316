"""Infrastructure Layer.

Contains concrete implementations of domain interfaces and technical services
(HTTP transport, API clients, resilience, configuration, console output).
"""
