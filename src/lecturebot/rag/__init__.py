"""
RAG Module - Retrieval-Augmented Generation pipeline.
=====================================================

This module implements the question-answering workflow:

- normalizer: Utterance extraction and validation
- retriever: Passage retrieval from the similarity index
- prompts: Policy / context / task prompt construction
- generator: Gemini answer generation
- composer: Refusal policy and answer composition
- pipeline: Sequential orchestration and top-level failure handling

RAG Flow:
    Utterance → Normalizer → Embedder → Retriever → Composer → Answer
"""

from lecturebot.rag.composer import AnswerComposer
from lecturebot.rag.generator import Generator
from lecturebot.rag.normalizer import extract_utterance, normalize_question
from lecturebot.rag.pipeline import RAGPipeline
from lecturebot.rag.prompts import Prompt, PromptBuilder, format_context
from lecturebot.rag.retriever import Retriever

__all__ = [
    # Normalizer
    "extract_utterance",
    "normalize_question",
    # Retriever
    "Retriever",
    # Prompts
    "Prompt",
    "PromptBuilder",
    "format_context",
    # Generator
    "Generator",
    # Composer
    "AnswerComposer",
    # Pipeline
    "RAGPipeline",
]
