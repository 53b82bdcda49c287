"""Upstream health reporting."""

from src.health.probe import HealthProbe, HealthReport, ServiceHealth


__all__ = ["HealthProbe", "HealthReport", "ServiceHealth"]
