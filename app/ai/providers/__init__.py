"""
TASKFLOW API - LLM Provider Adapters

One adapter per vendor behind a shared interface, selected by tool id.
"""
