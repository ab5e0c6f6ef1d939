"""Best-effort cleanup of scratch files and transient objects."""

import shutil
from collections.abc import Iterable
from pathlib import Path

from yorisoi.domain.models import CleanupReport
from yorisoi.infrastructure.interfaces.storage import ObjectStorage
from yorisoi.logging import setup_logging

logger = setup_logging()


def cleanup_local_paths(paths: Iterable[Path]) -> CleanupReport:
    """Removes local files or directories; a missing path counts as removed."""
    report = CleanupReport()
    for path in paths:
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink(missing_ok=True)
            report.succeeded.append(str(path))
        except OSError:
            logger.warning("Local cleanup failed", exc_info=True, extra={"path": str(path)})
            report.failed.append(str(path))
    return report


def cleanup_objects(storage: ObjectStorage, object_names: Iterable[str]) -> CleanupReport:
    """Deletes objects from storage, collecting failures instead of raising."""
    report = CleanupReport()
    for name in object_names:
        try:
            storage.delete(name)
            report.succeeded.append(name)
        except Exception:
            logger.warning("Object cleanup failed", exc_info=True, extra={"object_name": name})
            report.failed.append(name)
    return report
