"""
Hardware controllers and event sources
"""
