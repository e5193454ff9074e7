"""
atomic replacement of files that other programs read concurrently.

content is first written to a temporary file and then moved over the
target. the move is tried with a plain rename first, which is atomic on
the same filesystem; if the rename fails (typically EXDEV when the scratch
directory is on another volume) the temporary file is copied over the
target instead. the copy path is best-effort: a reader may observe a
truncated file while it runs.
"""
import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union

from ..domain.errors import FileIOError

logger = logging.getLogger(__name__)

FILE_MODE = 0o600
DIR_MODE = 0o755


class ReplaceStrategy(ABC):
    name: str = ""

    @abstractmethod
    def apply(self, source: Path, target: Path) -> None:
        """move the fully written source file into place at target."""
        pass


class RenameStrategy(ReplaceStrategy):
    """atomic swap via rename(2)."""
    name = "rename"

    def apply(self, source: Path, target: Path) -> None:
        os.replace(source, target)


class CopyStrategy(ReplaceStrategy):
    """truncate the target and copy the source into it. not atomic."""
    name = "copy"

    def apply(self, source: Path, target: Path) -> None:
        with open(source, "rb") as src:
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
            with os.fdopen(fd, "wb") as dst:
                shutil.copyfileobj(src, dst)
                dst.flush()
                os.fsync(dst.fileno())


class AtomicReplacer:
    """writes whole files through a temporary file and a replace strategy."""

    def __init__(
        self,
        scratch_dir: Optional[Path] = None,
        strategies: Optional[Sequence[ReplaceStrategy]] = None,
    ):
        # None means "next to the target", which keeps the rename on one volume
        self.scratch_dir = Path(scratch_dir) if scratch_dir is not None else None
        self.strategies = tuple(strategies) if strategies else (RenameStrategy(), CopyStrategy())

    def replace(self, target_path: Union[str, Path], content: Union[str, bytes]) -> ReplaceStrategy:
        """
        replace the contents of target_path with content.

        args:
            target_path: file to replace, created if missing
            content: full replacement, str is encoded as utf-8

        returns:
            the strategy that committed the write

        raises:
            FileIOError: if the temporary file cannot be written or no strategy succeeds
        """
        target = Path(target_path)
        data = content.encode("utf-8") if isinstance(content, str) else content
        scratch = self.scratch_dir or target.parent

        try:
            target.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=scratch, prefix=f".{target.name}.", suffix=".tmp")
        except OSError as e:
            raise FileIOError(target, f"Failed to create temporary file: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            return self._commit(tmp_path, target)
        except OSError as e:
            raise FileIOError(target, f"Failed to replace file: {e}") from e
        finally:
            self._discard(tmp_path)

    def _commit(self, source: Path, target: Path) -> ReplaceStrategy:
        error: Optional[OSError] = None
        for strategy in self.strategies:
            try:
                strategy.apply(source, target)
            except OSError as e:
                logger.debug(f"{strategy.name} failed for {target}: {e}")
                error = e
                continue
            logger.debug(f"replaced {target} using {strategy.name}")
            return strategy
        raise error if error else OSError(f"no replace strategy configured for {target}")

    @staticmethod
    def _discard(tmp_path: Path) -> None:
        # after a successful rename the temporary file is already gone
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"could not remove temporary file {tmp_path}: {e}")
