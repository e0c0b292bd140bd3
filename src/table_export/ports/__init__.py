"""Ports: contracts between the export engine and its collaborators."""
