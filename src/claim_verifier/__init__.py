"""Claim Verifier - evidence-based fact checking for spoken or typed claims.

A claim (typed, or transcribed from audio) is checked against Wikipedia
evidence by an LLM that must answer through a single forced tool call.

Components:
- main_api: FastAPI endpoints (/verify-claim, /transcribe)
- cli: command-line verify / serve
- pipeline: orchestration and citation mapping
- retrieval: Wikipedia search and evidence assembly
- llm: prompts, verdict synthesis, explanation translation
- speech: audio transcription proxy
- mlops: MLflow tracing
"""
