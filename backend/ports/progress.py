"""ProgressPort: abstract interface for reporting pipeline progress."""

from abc import ABC, abstractmethod
from typing import Optional


class ProgressPort(ABC):
    @abstractmethod
    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
        elapsed: Optional[float] = None,
    ) -> None:
        """Report the current stage label. Informational only.

        ``elapsed`` is seconds since the job started, measured by the caller.
        Implementations are shared across jobs and must not keep per-job state.
        """
