"""
AI Test Generator backend.
Generates exam question sets from free-text notes with Gemini and stores them as tests.
"""

__version__ = "1.0.0"
