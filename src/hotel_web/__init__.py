"""Server-rendered web frontend for the hotel reservation platform."""
