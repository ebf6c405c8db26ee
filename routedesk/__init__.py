"""
RouteDesk - route assignment service for a small delivery operation.
"""
__version__ = "1.0.0"
