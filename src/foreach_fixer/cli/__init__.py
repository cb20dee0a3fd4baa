"""
Command line interface of foreach-fixer.
"""
