"""Route provider chain and geocoding."""
