"""
Short-news crawler: site adapters, extractors and pipeline stages.
"""
