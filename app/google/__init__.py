"""
TASKFLOW API - Google Integration

OAuth connection flow and the Google Tasks REST client.
"""
