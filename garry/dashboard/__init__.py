"""Dashboard package - one consistent render pass over the user's warranties."""
from .service import DashboardRow, DashboardService, DashboardView

__all__ = ["DashboardRow", "DashboardService", "DashboardView"]
