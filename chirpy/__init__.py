"""Chirpy: a small social-posting API with password login and token sessions."""
