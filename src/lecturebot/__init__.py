"""
LectureBot - Lecture-grounded RAG Chatbot for Kakao i Open Builder
==================================================================

Answers student questions about a fixed body of lecture material using a
Retrieval-Augmented Generation workflow and returns the answer inside a
Kakao skill response envelope:

    utterance → normalize → embed → similarity search → grounded prompt → answer

Every request is independent; there is no session, cache, or memory.
"""

__version__ = "0.1.0"
__author__ = "LectureBot Team"
__license__ = "MIT"

# Public API - lazy imports to keep startup cheap
__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Main modules (imported on demand)
    "shared",
    "indexing",
    "rag",
    "app",
    "cli",
]
