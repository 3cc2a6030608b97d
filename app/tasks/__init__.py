"""
TASKFLOW API - Tasks Module

Task CRUD against Google Tasks, or the local in-memory store when the user
has not connected Google.
"""
