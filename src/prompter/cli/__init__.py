"""Prompter CLI package."""
