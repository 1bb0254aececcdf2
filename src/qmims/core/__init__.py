"""Configuration, mode parsing and git helpers."""
