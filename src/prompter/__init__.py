"""Prompter — fuzzy, frecency-ranked prompt launcher."""
