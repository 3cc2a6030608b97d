"""
TASKFLOW API

Backend for the TaskFlow to-do clients: Google Tasks proxy, AI key
management and the natural-language task command interpreter.
"""
