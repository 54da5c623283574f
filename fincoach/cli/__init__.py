"""Command-line interface for FinCoach."""
