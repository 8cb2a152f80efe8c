"""Configuration loading and writing."""
