"""
diplomas – scraper + JSON API for the FINKI thesis portal.
"""

from diplomas.model import Diploma, MentorStats, MentorSummary

__all__ = ["Diploma", "MentorStats", "MentorSummary"]
