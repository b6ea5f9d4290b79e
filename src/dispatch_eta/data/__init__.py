"""Data access for external stores."""
