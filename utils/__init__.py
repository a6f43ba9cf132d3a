"""
Utilities Package for Keep-Alive Bot

Logging setup, input validators and time helpers.
"""
