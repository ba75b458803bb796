"""BoardEasy bus booking workflow service."""
