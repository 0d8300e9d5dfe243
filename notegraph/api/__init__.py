"""HTTP API for the note tree."""
