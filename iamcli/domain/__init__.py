"""Domain layer: core models, errors and interfaces for the IAM client.

Bounded Context: IAM Group Management
"""
