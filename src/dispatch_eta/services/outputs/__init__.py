"""Display formatting of estimation results."""
