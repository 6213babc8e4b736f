"""Helper utilities shared by steps, jobs and the CLI."""
