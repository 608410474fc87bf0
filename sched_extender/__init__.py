"""Metric-driven Kubernetes scheduler extender service."""
