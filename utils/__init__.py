"""
Utilities package for the short-news pipeline.
"""
