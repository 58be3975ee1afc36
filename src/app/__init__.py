"""
Command-line host for stackview.

Kept apart from the stackview library package: the library never reads files or
prints, the host does both.

CLI entrypoint (configured in pyproject.toml):
    stackview = app.main:main
"""
