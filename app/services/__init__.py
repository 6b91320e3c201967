"""
Daily Tasks Services Package

- rollover_service: Copies yesterday's incomplete tasks into today's page
"""

from .rollover_service import RolloverResult, RolloverService

__all__ = ["RolloverResult", "RolloverService"]
