# core/__init__.py
"""
Core application for Koabiga: session lifecycle, activity auditing and
admin monitoring.
"""
