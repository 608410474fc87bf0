"""Contracts and backend clients shared by the scheduler extender."""
