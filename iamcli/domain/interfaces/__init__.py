"""Domain interfaces (abstract base classes) implemented by the infrastructure layer.
"""
