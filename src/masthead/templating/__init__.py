"""Kida templating: site directives and the page renderer."""
