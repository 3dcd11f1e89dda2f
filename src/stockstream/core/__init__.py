"""Core computation for stockstream."""
