"""File filtering — decide which tree entries are worth sending to the LLM."""

from __future__ import annotations

from readme_generator.domain.entities import FileCandidate

MAX_FILES = 20
MAX_FILE_SIZE_BYTES = 20_000

SKIP_DIR_SEGMENTS: tuple[str, ...] = ("dist/", "build/", "node_modules/")

SKIP_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".ico", ".webp",
        ".tif", ".tiff", ".psd",
        ".mp3", ".mp4", ".avi", ".mov", ".wav",
        ".woff", ".woff2", ".ttf", ".eot", ".otf",
        ".zip", ".tar", ".gz", ".bz2", ".rar", ".7z",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx",
        ".pyc", ".pyo", ".so", ".o", ".a", ".dylib",
        ".dll", ".exe", ".bin", ".class", ".jar", ".wasm",
        ".lock",
    }
)

SKIP_FILENAMES: frozenset[str] = frozenset(
    {
        ".ds_store",
        "package-lock.json",
        "npm-shrinkwrap.json",
        "pnpm-lock.yaml",
        "yarn.lock",
        "bun.lockb",
        "pipfile.lock",
        "poetry.lock",
        "composer.lock",
        "gemfile.lock",
        "cargo.lock",
        "go.sum",
    }
)

PRIORITY_MANIFESTS: tuple[str, ...] = (
    "package.json",
    "cargo.toml",
    "requirements.txt",
    "go.mod",
    "readme.md",
)


def _filename(path: str) -> str:
    return path.rsplit("/", maxsplit=1)[-1]


def _in_skip_dir(path_lower: str) -> bool:
    """Return *True* if any path segment is a build output or dependency folder."""
    prefixed = f"/{path_lower}"
    return any(f"/{segment}" in prefixed for segment in SKIP_DIR_SEGMENTS)


def is_excluded(path: str) -> bool:
    """Return *True* for binaries, images, lockfiles and vendored/build output."""
    path_lower = path.lower()
    if _filename(path_lower) in SKIP_FILENAMES:
        return True
    if any(path_lower.endswith(ext) for ext in SKIP_EXTENSIONS):
        return True
    return _in_skip_dir(path_lower)


def is_priority_manifest(path: str) -> bool:
    """Manifests and READMEs are kept regardless of their size."""
    path_lower = path.lower()
    return any(path_lower.endswith(name) for name in PRIORITY_MANIFESTS)


def should_keep(node: FileCandidate, max_size_bytes: int = MAX_FILE_SIZE_BYTES) -> bool:
    if node.type != "blob":
        return False
    if is_excluded(node.path):
        return False
    if is_priority_manifest(node.path):
        return True
    return node.size < max_size_bytes


def select_candidates(
    nodes: list[FileCandidate],
    max_files: int = MAX_FILES,
    max_size_bytes: int = MAX_FILE_SIZE_BYTES,
) -> list[FileCandidate]:
    """Filter the raw tree and keep the first *max_files* survivors, in tree order."""
    kept = [node for node in nodes if should_keep(node, max_size_bytes)]
    return kept[:max_files]
