"""
seic Command-Line Interface
===========================

This package provides the ``seic`` command (``seic.cli.seic:main``), a
Click-based front end for the compiler with help text and consistent
error reporting.
"""
