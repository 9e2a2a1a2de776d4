# embedline/logging/tags.py
"""Subsystem tags prefixed to log messages."""

TRUST = "[TRUST]"
CONNECTOR = "[CONNECTOR]"
MODEL = "[MODEL]"
PIPELINE = "[PIPELINE]"
WRITER = "[WRITER]"
STORE = "[STORE]"
CONFIG = "[CONFIG]"
CLI = "[CLI]"
API = "[API]"
