"""
Placify
AI placement readiness companion for students.

Architecture:
- PostgreSQL: Structured data (users, profiles, analyses)
- MongoDB: Intake drafts and uploaded document text
- Generative AI: produces the readiness analysis (score, gaps, matches, plan)
"""

__version__ = "1.0.0"
