"""
TASKFLOW API - Credential Store

Encrypted Google OAuth tokens and per-provider AI keys.
"""
