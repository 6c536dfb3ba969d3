"""
CLI Module - Command-line interface for LectureBot.
===================================================

Usage:
    lecturebot --help
    lecturebot serve --port 8000
    lecturebot ask "환불 정책이 어떻게 되나요?"
    lecturebot info
"""

from lecturebot.cli.main import app, cli

__all__ = ["app", "cli"]
