"""Command-line tools built on the matching core."""
