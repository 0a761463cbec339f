# pipeline/transparency_fixer.py
import os
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator

from dotenv import load_dotenv
from tqdm import tqdm

from ..models.batch_report import BatchReport
from ..models.errors import DecodeError, EncodeError
from ..models.fix_result import FixResult
from ..services.image_service import ImageService
from ..services.transparency_service import TransparencyService

# ------------------------------------------------------------------
# env‑vars
load_dotenv()
WORKERS   = int(os.getenv("FIXER_WORKERS", "1"))
FAIL_FAST = os.getenv("FAIL_FAST", "false").strip().lower() in {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def fix_file(
    path: Path,
    image_service: ImageService,
    transparency_service: TransparencyService,
) -> FixResult:
    """
    Load → fix → save (only when something changed) for a single file.
    Raises DecodeError / EncodeError.
    """
    img = image_service.load(path)
    result = transparency_service.fix(img)
    if result.modified:
        image_service.save(result.image)
    return result


def fix_transparent_pixels(
    pattern: str,
    *,
    image_service: ImageService | None               = None,
    transparency_service: TransparencyService | None = None,
    workers: int                                     = WORKERS,
    fail_fast: bool                                  = FAIL_FAST,
    progress: bool                                   = False,
) -> BatchReport:
    """
    For every PNG matched by *pattern*:
        • decode it into an RGBA grid
        • recolour transparent pixels from their neighbours
        • overwrite the file, only if a pixel changed
    Path-resolution errors are logged and skipped. Decode/encode errors
    are logged and the file is skipped, unless *fail_fast* is set, in which
    case the first one aborts the run. A malformed pattern raises
    PatternError before anything is touched.
    """
    image_service = image_service or ImageService()
    transparency_service = transparency_service or TransparencyService()
    image_service.validate_pattern(pattern)
    report = BatchReport()

    matches = image_service.stream_matches(pattern)
    if progress:
        matches = tqdm(matches, desc="fix", unit="file", ncols=70)
    emit = tqdm.write if progress else print

    def candidates() -> Iterator[Path]:
        for match in matches:
            if match.error is not None:
                logger.error(str(match.error))
                report.unresolved.append(match.error)
                continue
            yield match.path

    def record(path: Path, result: FixResult) -> None:
        if result.modified:
            emit(f"Updated file: {path}")
            report.updated.append(path)
        else:
            report.unchanged.append(path)

    def skip(path: Path, err: DecodeError | EncodeError) -> None:
        logger.error(f"Skipping {path}: {err}")
        report.skipped.append((path, err))

    if workers <= 1:
        for path in candidates():
            try:
                result = fix_file(path, image_service, transparency_service)
            except (DecodeError, EncodeError) as err:
                if fail_fast:
                    raise
                skip(path, err)
                continue
            record(path, result)
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                (path, executor.submit(fix_file, path, image_service, transparency_service))
                for path in candidates()
            ]
            for path, future in futures:
                try:
                    result = future.result()
                except (DecodeError, EncodeError) as err:
                    if fail_fast:
                        executor.shutdown(wait=True, cancel_futures=True)
                        raise
                    skip(path, err)
                    continue
                record(path, result)

    logger.info(
        f"Processed {report.processed} files: {len(report.updated)} updated, "
        f"{len(report.unchanged)} unchanged, {len(report.skipped)} skipped, "
        f"{len(report.unresolved)} unresolved"
    )
    return report
