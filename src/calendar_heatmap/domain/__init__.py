"""Domain layer: the events published by the calendar engine.

Everything here is immutable.
"""
