"""
Analysis result schemas (frozen dataclasses).
"""
