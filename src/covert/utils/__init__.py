"""Shared helpers: demangling and output sinks."""
