"""
Utilities package for Timer-Discord-Bot
"""
