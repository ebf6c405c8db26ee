"""
HTTP API package for RouteDesk.
"""
