"""
Shared constants used across the application.

This module contains constants that need to be consistent across
different parts of the application (forms, templates, validation, etc.).
"""

# Idea categories (used in the submission form and validation)
# Order matters: it is the order shown in the category select
CATEGORIES = [
    "Productivity",
    "Healthcare",
    "Education",
    "Entertainment",
    "Business",
    "Creative",
    "Social Good",
    "Developer Tools",
    "Lifestyle",
    "Other",
]

# Suggested tags shown as hints next to the tags input
EXAMPLE_TAGS = ["AI", "Machine Learning", "Automation", "Chatbot", "Computer Vision", "NLP", "Analytics"]

# Datastore table holding submitted ideas
IDEAS_TABLE = "ai_ideas"
