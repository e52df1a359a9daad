"""Command-line tools for rosmsg."""
