"""Reconcile Jobber residential exports into one opportunity per client and address."""

__version__ = "0.1.0"
