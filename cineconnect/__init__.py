"""cineconnect: social API for film fans."""
