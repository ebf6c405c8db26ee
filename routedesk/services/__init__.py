"""
Domain services for RouteDesk.
"""
