"""
Pipeline stages: ingestion, sync and the staged runner.
"""
