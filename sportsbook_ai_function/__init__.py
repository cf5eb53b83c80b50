"""Sportsbook AI HTTP Cloud Function."""
