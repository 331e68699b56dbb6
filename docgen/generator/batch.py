"""
Batch generation - Run several per-screen generations at once.

All units are dispatched together and joined; each unit's status moves
pending -> generating -> done | error. The batch succeeds when at least
one unit reaches done.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Any, List, Optional, Sequence

from ..core.errors import DocGenError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ScreenStatus(Enum):
    """Lifecycle of one unit in a batch."""
    PENDING = "pending"
    GENERATING = "generating"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ScreenStatus.DONE, ScreenStatus.ERROR)


StatusCallback = Callable[[int, ScreenStatus], None]


@dataclass
class BatchResult:
    """Outcome of a batch: final statuses, artifacts and errors per index."""
    statuses: Dict[int, ScreenStatus] = field(default_factory=dict)
    results: Dict[int, Any] = field(default_factory=dict)
    errors: Dict[int, DocGenError] = field(default_factory=dict)

    @property
    def successes(self) -> List[int]:
        return sorted(i for i, s in self.statuses.items() if s is ScreenStatus.DONE)

    @property
    def failures(self) -> List[int]:
        return sorted(i for i, s in self.statuses.items() if s is ScreenStatus.ERROR)

    @property
    def complete(self) -> bool:
        return all(s.is_terminal for s in self.statuses.values())

    @property
    def success(self) -> bool:
        """Partial success is success; only an all-error batch fails."""
        return bool(self.successes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "statuses": {i: s.value for i, s in sorted(self.statuses.items())},
            "success_count": len(self.successes),
            "failure_count": len(self.failures),
            "errors": {i: e.to_dict() for i, e in sorted(self.errors.items())},
        }


def run_batch(
    indexes: Sequence[int],
    work: Callable[[int], Any],
    on_status: Optional[StatusCallback] = None,
) -> BatchResult:
    """
    Run ``work(index)`` for every index concurrently and wait for all.

    Pipeline errors (DocGenError) mark their unit as error and never
    cancel the others. Any other exception is a programming error and
    propagates once every unit has finished.

    Args:
        indexes: Screen indexes to generate (duplicates are ignored)
        work: Full per-unit pipeline
        on_status: Called on every status transition

    Returns:
        BatchResult with every index in a terminal state
    """
    unique = list(dict.fromkeys(indexes))
    result = BatchResult(statuses={i: ScreenStatus.PENDING for i in unique})
    if not unique:
        return result

    lock = threading.Lock()

    def set_status(index: int, status: ScreenStatus) -> None:
        with lock:
            result.statuses[index] = status
        if on_status:
            on_status(index, status)

    def run_one(index: int) -> None:
        set_status(index, ScreenStatus.GENERATING)
        try:
            artifact = work(index)
        except DocGenError as e:
            logger.warning(f"Screen {index} failed: [{e.kind}] {e.detail}")
            with lock:
                result.errors[index] = e
            set_status(index, ScreenStatus.ERROR)
            return
        except Exception:
            set_status(index, ScreenStatus.ERROR)
            raise
        with lock:
            result.results[index] = artifact
        set_status(index, ScreenStatus.DONE)

    with ThreadPoolExecutor(max_workers=len(unique), thread_name_prefix="docgen-screen") as pool:
        futures = [pool.submit(run_one, i) for i in unique]

    for future in futures:
        future.result()

    logger.info(
        f"Batch finished: {len(result.successes)} done, {len(result.failures)} failed"
    )
    return result
