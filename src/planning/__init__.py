"""Wedding planning features that act as webhook event sources."""

from src.planning.service import PlanningService

__all__ = ["PlanningService"]
