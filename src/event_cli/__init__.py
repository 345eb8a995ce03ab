"""
Event client command line: the ``event-client`` command and its report.
"""
from .main import cli, main

__all__ = ['cli', 'main']
