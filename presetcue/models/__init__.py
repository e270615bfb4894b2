"""
Data models
"""
