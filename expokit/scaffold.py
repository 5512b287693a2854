from __future__ import annotations

import fnmatch
import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

from .config import CONFIG_FILENAME, ScaffoldConfig, load_config
from .naming import derive_display_name, derive_slug, replace_all

logger = logging.getLogger(__name__)


class ScaffoldError(RuntimeError):
    pass


class InvalidProjectNameError(ScaffoldError):
    pass


class ScaffoldCancelled(ScaffoldError):
    pass


class DirectoryCreationError(ScaffoldError):
    pass


class CopyError(ScaffoldError):
    pass


class FileStatus(str, Enum):
    rewritten = "rewritten"
    unchanged = "unchanged"
    missing = "missing"
    failed = "failed"


@dataclass(frozen=True)
class FileOutcome:
    name: str
    status: FileStatus
    replacements: int = 0
    message: str = ""


@dataclass(frozen=True)
class ScaffoldOptions:
    destination: Path
    source_root: Path
    config: ScaffoldConfig | None = None
    # Asked before reusing an existing destination; None refuses.
    confirm: Callable[[str], bool] | None = None


@dataclass(frozen=True)
class ScaffoldReport:
    source: Path
    destination: Path
    created: bool
    slug: str
    display_name: str
    copied: int
    files: tuple[FileOutcome, ...]

    @property
    def ok(self) -> bool:
        return all(outcome.status != FileStatus.failed for outcome in self.files)

    @property
    def warnings(self) -> tuple[FileOutcome, ...]:
        return tuple(
            outcome for outcome in self.files if outcome.status in (FileStatus.missing, FileStatus.failed)
        )


def resolve_target(destination: Path, confirm: Callable[[str], bool] | None) -> bool:
    """Make sure ``destination`` is a usable directory.

    Returns ``True`` when the directory had to be created. An existing directory
    is only reused when ``confirm`` answers affirmatively.
    """
    if destination.is_dir():
        prompt = f"Target directory '{destination}' already exists. Continue and potentially overwrite files?"
        if confirm is None or not confirm(prompt):
            raise ScaffoldCancelled("Operation cancelled.")
        return False

    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise DirectoryCreationError(
            f"Could not create target directory '{destination}': {error.strerror or error}"
        ) from error
    logger.debug("Created %s", destination)
    return True


def _matches(pattern: str, name: str, relative: str, entry: Path) -> bool:
    dir_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    if dir_only and (entry.is_symlink() or not entry.is_dir()):
        return False
    if "/" in pattern:
        return fnmatch.fnmatchcase(relative, pattern.lstrip("/"))
    return fnmatch.fnmatchcase(name, pattern)


def _build_ignore(root: Path, destination: Path, patterns: tuple[str, ...]) -> Callable[[str, list[str]], set[str]]:
    ancestors = set(destination.parents)

    def ignore(directory: str, names: list[str]) -> set[str]:
        current = Path(directory)
        ignored: set[str] = set()
        for name in names:
            entry = current / name
            # A destination nested in the source is skipped along with its parents.
            if entry == destination or entry in ancestors:
                ignored.add(name)
                continue
            relative = entry.relative_to(root).as_posix()
            if any(_matches(pattern, name, relative, entry) for pattern in patterns):
                logger.debug("Excluded %s", relative)
                ignored.add(name)
        return ignored

    return ignore


def _describe_copy_error(error: OSError) -> str:
    if isinstance(error, shutil.Error) and error.args and isinstance(error.args[0], list):
        failures = error.args[0]
        if failures:
            source, _, reason = failures[0]
            suffix = f" (and {len(failures) - 1} more)" if len(failures) > 1 else ""
            return f"{source}: {reason}{suffix}"
    return str(error)


def copy_template(source_root: Path, destination: Path, exclude: Iterable[str]) -> int:
    """Copy the contents of ``source_root`` into ``destination`` and return the number of files copied."""
    root = source_root.resolve()
    if not root.is_dir():
        raise CopyError(f"Template directory does not exist: {root}")

    target = destination.resolve()
    copied: list[str] = []

    def copy_file(src: str, dst: str) -> str:
        logger.debug("Copy %s", Path(src).relative_to(root).as_posix())
        result = shutil.copy2(src, dst)
        copied.append(dst)
        return result

    try:
        shutil.copytree(
            root,
            target,
            ignore=_build_ignore(root, target, tuple(exclude)),
            symlinks=True,
            copy_function=copy_file,
            dirs_exist_ok=True,
        )
    except OSError as error:
        raise CopyError(f"An error occurred during the file copy process: {_describe_copy_error(error)}") from error

    return len(copied)


def _rewrite_file(path: Path, name: str, slug: str, display_name: str, config: ScaffoldConfig) -> FileOutcome:
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            original = handle.read()
    except (OSError, UnicodeDecodeError) as error:
        return FileOutcome(name=name, status=FileStatus.failed, message=f"Failed to read: {error}")

    content, total = replace_all(original, config.slug_placeholder, slug)
    # The generic pass has already turned "<prefix><slug placeholder>" into
    # "<prefix><slug>", so only the compact bundle placeholder is left here.
    if name == config.manifest_file:
        content, count = replace_all(content, config.bundle_id_pattern, f"{config.bundle_id_prefix}{slug}")
        total += count
    if config.name_placeholder:
        content, count = replace_all(content, config.name_placeholder, display_name)
        total += count

    if content == original:
        return FileOutcome(name=name, status=FileStatus.unchanged)

    try:
        # Like sed -i, a symlinked target is replaced by a regular file.
        if path.is_symlink():
            path.unlink()
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as error:
        return FileOutcome(name=name, status=FileStatus.failed, message=f"Failed to write: {error}")

    logger.debug("Rewrote %s (%d replacement(s))", name, total)
    return FileOutcome(name=name, status=FileStatus.rewritten, replacements=total)


def rewrite_placeholders(
    destination: Path,
    slug: str,
    display_name: str,
    config: ScaffoldConfig,
) -> tuple[FileOutcome, ...]:
    outcomes: list[FileOutcome] = []
    for name in config.target_files:
        path = destination / name
        if not path.is_file():
            logger.warning("Expected file '%s' not found in target directory. Skipping.", name)
            outcomes.append(
                FileOutcome(
                    name=name,
                    status=FileStatus.missing,
                    message=f"Expected file '{name}' not found in target directory. Skipping.",
                )
            )
            continue

        outcome = _rewrite_file(path, name, slug, display_name, config)
        if outcome.status == FileStatus.failed:
            logger.warning("Failed to process file '%s': %s", name, outcome.message)
        outcomes.append(outcome)
    return tuple(outcomes)


def scaffold_project(options: ScaffoldOptions) -> ScaffoldReport:
    destination = options.destination
    slug = derive_slug(destination.name)
    if not slug:
        raise InvalidProjectNameError(
            f"Cannot derive a project slug from '{destination.name or destination}'. "
            "Use a destination whose name contains letters or digits."
        )
    display_name = derive_display_name(slug)

    if not options.source_root.is_dir():
        raise CopyError(f"Template directory does not exist: {options.source_root.resolve()}")

    config = options.config or load_config(options.source_root)

    created = resolve_target(destination, options.confirm)
    copied = copy_template(
        options.source_root,
        destination,
        config.exclude + (f"/{CONFIG_FILENAME}",),
    )
    files = rewrite_placeholders(destination, slug, display_name, config)

    return ScaffoldReport(
        source=options.source_root.resolve(),
        destination=destination.resolve(),
        created=created,
        slug=slug,
        display_name=display_name,
        copied=copied,
        files=files,
    )
