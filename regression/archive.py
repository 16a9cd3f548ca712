# =============================================================================
# Vision Regression - Snapshot Archiver
# =============================================================================
# Moves the screenshots exercised by a run into a timestamped archive folder
# and stores the verdict next to them, leaving the working snapshot
# directory empty for the next run.
# =============================================================================

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from shared.schemas import Verdict

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".Vision.Test.Output"
VERDICT_FILENAME = "verdict.json"


def archive_folder_name(now: datetime) -> str:
    """Name of the archive folder for a run finished at ``now``."""
    return f"{now.strftime('%Y%m%d%H%M%S')}{ARCHIVE_SUFFIX}"


def archive_snapshots(
    paths: Iterable[Union[str, Path]],
    archive_root: Union[str, Path],
    verdict: Optional[Verdict] = None,
    now: Optional[datetime] = None,
    move: bool = True,
) -> Path:
    """
    Archive the snapshot files of a run.

    Each existing file is copied into ``{archive_root}/{timestamp}.Vision.Test.Output``
    and, when ``move`` is set, the original is deleted.  Missing files are
    skipped.

    Args:
        paths:        Snapshot files to archive.
        archive_root: Directory holding all archive folders.
        verdict:      Optional verdict, written as verdict.json.
        now:          Timestamp for the folder name (defaults to local now).
        move:         Delete the originals after copying.  Files this run did
                      not produce should be archived with move=False.

    Returns:
        Path of the created archive folder.
    """
    folder = Path(archive_root) / archive_folder_name(now or datetime.now())
    folder.mkdir(parents=True, exist_ok=True)

    for path in map(Path, paths):
        if not path.exists():
            logger.debug("Nothing to archive at %s", path)
            continue
        shutil.copy2(path, folder / path.name)
        if move:
            path.unlink()
        logger.info("Archived %s → %s", path.name, folder)

    if verdict is not None:
        (folder / VERDICT_FILENAME).write_text(
            verdict.model_dump_json(indent=2), encoding="utf-8"
        )

    return folder
