"""iamcli: a resilient client and command line for the IAM groups API."""

__version__ = "0.1.0"
