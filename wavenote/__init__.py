# wavenote/__init__.py

"""
WaveNote - Personal To-Do App

Web application for keeping a personal list of tasks with deadlines.
"""

__version__ = "1.0.0"
