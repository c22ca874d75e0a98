"""
CLI reporting helpers.

Modules
-------
formatters  ASCII tables for recommendation lists (typer.echo-ready strings).
"""
