"""
App Module - Kakao skill webhook.

Usage:
    uvicorn lecturebot.app.server:create_app --factory
"""

from lecturebot.app.server import create_app

__all__ = ["create_app"]
