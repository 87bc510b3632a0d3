"""Command-line front end for the entity binding engine."""
