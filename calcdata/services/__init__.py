"""Extraction services: settings, column roles, pricing maps, artifact I/O, run orchestration."""
