"""Utility helpers for pathbackup."""
