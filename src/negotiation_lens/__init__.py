"""
Negotiation Lens

Conversation signal extraction: language, emotion/intent, ethics screening,
belief state, pattern prediction and strategy ranking.
"""

__version__ = "0.1.0"
