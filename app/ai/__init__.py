"""
TASKFLOW API - AI Command Package

Natural-language task commands: provider adapters, command normalization,
intent routing, the pending add-task flow and command execution.
"""
