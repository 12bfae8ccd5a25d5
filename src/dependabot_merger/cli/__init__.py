"""Command line interface for dependabot-merger."""
