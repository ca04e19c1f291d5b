"""
MLflow tracing integration for LLM observability.
Provides span-based tracing for retrieval, verdict synthesis and translation.
"""
import logging
import time
from typing import Optional, Dict, Any, List
from contextlib import contextmanager

import mlflow

from ..config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class MLflowTracer:
    """Handles MLflow tracing for LLM observability."""

    def __init__(self):
        self.enabled = settings.MLFLOW_ENABLE_TRACING
        if self.enabled:
            try:
                mlflow.set_tracking_uri(settings.MLFLOW_TRACKING_URI)
                logger.info("MLflow tracing enabled")
            except Exception as e:
                logger.warning(f"Failed to initialize MLflow tracing: {e}")
                self.enabled = False
        else:
            logger.debug("MLflow tracing disabled")

    @contextmanager
    def span(
        self,
        name: str,
        span_type: str = "UNKNOWN",
        attributes: Optional[Dict[str, Any]] = None,
        inputs: Optional[Dict[str, Any]] = None
    ):
        """
        Create a traced span for an operation.

        Args:
            name: Name of the span (e.g., "retrieval.search", "synthesis.verdict")
            span_type: Type of span (e.g., "LLM", "RETRIEVER", "CHAIN")
            attributes: Additional metadata for the span
            inputs: Input data to the operation
        """
        if not self.enabled:
            yield None
            return

        with mlflow.start_span(name=name, span_type=span_type) as span:
            if attributes:
                span.set_attributes(attributes)
            if inputs:
                span.set_inputs(inputs)

            start_time = time.time()
            yield span
            elapsed = time.time() - start_time
            span.set_attribute("latency_ms", int(elapsed * 1000))

    def _set_current(self, attributes: Dict[str, Any]):
        try:
            current_span = mlflow.get_current_active_span()
            if current_span:
                current_span.set_attributes(attributes)
        except Exception as e:
            logger.warning(f"Failed to set span attributes: {e}")

    def trace_llm_call(
        self,
        model: str,
        prompt_chars: int,
        tool_calls: Optional[List[str]] = None,
        tokens: Optional[Dict[str, int]] = None
    ):
        """Log details of an LLM call within the current span."""
        if not self.enabled:
            return

        attributes: Dict[str, Any] = {
            "model": model,
            "prompt_length": prompt_chars,
        }
        if tool_calls is not None:
            attributes["tool_calls"] = ",".join(tool_calls)
            attributes["tool_call_count"] = len(tool_calls)
        if tokens:
            attributes.update(tokens)

        self._set_current(attributes)

    def trace_retrieval(
        self,
        language: str,
        hit_count: int,
        evidence_count: int,
        empty_content_count: int
    ):
        """Log details of an evidence retrieval."""
        if not self.enabled:
            return

        self._set_current({
            "language": language,
            "hit_count": hit_count,
            "evidence_count": evidence_count,
            "empty_content_count": empty_content_count,
        })


# Global tracer instance
tracer = MLflowTracer()
