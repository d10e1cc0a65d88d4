"""
Error taxonomy for the analysis/generation pipeline.
Every failure that leaves the pipeline is one of the four subclasses below.
"""

from typing import Any, Dict, Optional


class AutoSkeletonError(Exception):
    code = "AUTO_SKELETON_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context: Dict[str, Any] = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, "code": self.code, "message": self.message, "context": self.context}


class RenderEnvironmentError(AutoSkeletonError):
    """The host cannot provide geometry/style reads at all. Fatal, never retried."""

    code = "ENVIRONMENT_ERROR"


class ElementNotFoundError(AutoSkeletonError):
    """Root handle is missing or detached; retry once the real tree is mounted."""

    code = "ELEMENT_NOT_FOUND"


class AnalysisTimeoutError(AutoSkeletonError):
    code = "ANALYSIS_TIMEOUT"

    def __init__(self, message: str, timeout: float, elapsed: float, context: Optional[Dict[str, Any]] = None):
        ctx = {"timeout": timeout, "elapsed": elapsed}
        ctx.update(context or {})
        super().__init__(message, context=ctx)
        self.timeout = timeout
        self.elapsed = elapsed


class GenerationFailedError(AutoSkeletonError):
    code = "GENERATION_FAILED"

    def __init__(self, message: str, generation_time: float, context: Optional[Dict[str, Any]] = None):
        ctx = {"generation_time": generation_time}
        ctx.update(context or {})
        super().__init__(message, context=ctx)
        self.generation_time = generation_time
