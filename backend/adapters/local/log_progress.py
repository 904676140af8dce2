"""LogProgressAdapter: logs each pipeline stage with the job's elapsed time."""

import logging
from typing import Optional

from ports.progress import ProgressPort

logger = logging.getLogger(__name__)


class LogProgressAdapter(ProgressPort):
    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
        elapsed: Optional[float] = None,
    ) -> None:
        parts = [f"[{job_id}] {stage}"]
        if progress > 0:
            parts.append(f"{progress:.0%}")
        if detail:
            parts.append(f"({detail})")
        if elapsed is not None:
            parts.append(f"+{elapsed:.1f}s")
        logger.info(" ".join(parts))
