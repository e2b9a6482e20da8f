"""Exam text parsing and import service."""
