"""Shared configuration, errors, I/O and threading helpers."""
