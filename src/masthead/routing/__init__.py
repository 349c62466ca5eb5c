"""Routing: compiled route table with trie-based matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.
"""
