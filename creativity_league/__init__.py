"""Creativity League: daily prompts, weekly tasks and a simulated leaderboard."""

VERSION = "1.0.0"
