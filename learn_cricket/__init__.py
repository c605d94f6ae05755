"""
Learn Cricket - answer questions against the clock, build an innings
"""
__version__ = "0.1.0"
