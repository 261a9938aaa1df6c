"""Utilities package"""
from .report import DashboardReporter

__all__ = ['DashboardReporter']
