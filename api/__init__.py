"""
HTTP API package for Business Card Fusion API.
"""
