"""Users REST API: registration, login and bearer token verification."""
