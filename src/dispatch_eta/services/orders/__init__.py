"""Order creation, delivery performance and delay detection."""
