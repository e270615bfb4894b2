"""
Qt user interface
"""
