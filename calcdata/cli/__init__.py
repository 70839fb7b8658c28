"""Command line entrypoint (`python -m calcdata.cli`)."""
