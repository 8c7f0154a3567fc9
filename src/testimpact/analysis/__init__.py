from .impact_analyzer import ImpactAnalyzer
from .selection_planner import TestSelectionPlanner

__all__ = ['ImpactAnalyzer', 'TestSelectionPlanner']
