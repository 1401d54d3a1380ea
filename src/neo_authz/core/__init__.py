"""Core building blocks: exceptions and argument validation."""
