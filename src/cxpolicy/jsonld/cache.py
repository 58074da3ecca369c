"""
Cached JSON-LD documents.

Policy definitions reference remote JSON-LD contexts. The ones shipped
with this package are materialized to local files at startup and
registered under their canonical URL, so expansion never has to fetch
them.

Registration is best effort: a missing or unreadable resource is logged
and skipped, it never aborts startup.
"""

import logging
import tempfile
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

logger = logging.getLogger(__name__)


CX_POLICY_2025_09_ODRL = "https://w3id.org/catenax/2025/9/policy/odrl.jsonld"

# Canonical URL -> resource path inside this package
CACHED_DOCUMENTS: dict[str, str] = {
    CX_POLICY_2025_09_ODRL: "documents/odrl.jsonld",
}


@dataclass
class DocumentRegistration:
    """Outcome of registering one cached document."""

    url: str
    success: bool
    path: Path | None = None
    error: str | None = None


class DocumentCache:
    """Maps canonical document URLs to local files."""

    def __init__(self) -> None:
        self._documents: dict[str, Path] = {}

    def register(self, url: str, path: Path) -> None:
        self._documents[url] = path

    def resolve(self, url: str) -> Path | None:
        """Get the local file for a URL, if cached."""
        return self._documents.get(url)

    def urls(self) -> list[str]:
        return list(self._documents.keys())

    def __contains__(self, url: str) -> bool:
        return url in self._documents

    def __len__(self) -> int:
        return len(self._documents)


def register_cached_documents(
    cache: DocumentCache,
    documents: dict[str, str] | None = None,
    target_dir: Path | None = None,
    package: str = __package__,
) -> list[DocumentRegistration]:
    """
    Materialize bundled documents and register them in the cache.

    Args:
        cache: Cache to register documents in
        documents: URL -> resource path pairs (defaults to CACHED_DOCUMENTS)
        target_dir: Directory for the local copies (system temp dir if None)
        package: Package the resource paths are relative to

    Returns:
        One DocumentRegistration per entry, failures included
    """
    if documents is None:
        documents = CACHED_DOCUMENTS

    results: list[DocumentRegistration] = []
    for url, resource_name in documents.items():
        result = _materialize(url, resource_name, package, target_dir)
        if result.success and result.path is not None:
            cache.register(url, result.path)
            logger.debug(f"Registered cached json-ld document {url} -> {result.path}")
        else:
            logger.warning(f"Failed to register cached json-ld document: {result.error}")
        results.append(result)

    return results


def _materialize(
    url: str, resource_name: str, package: str, target_dir: Path | None
) -> DocumentRegistration:
    """Copy a package resource to a temporary file."""
    try:
        resource = resources.files(package).joinpath(resource_name)
        if not resource.is_file():
            return DocumentRegistration(url, False, error=f"Cannot find resource {resource_name}")

        content = resource.read_bytes()
        filename = Path(resource_name).name
        stem, _, suffix = filename.partition(".")

        if target_dir is not None:
            target_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            prefix=f"{stem}-",
            suffix=f".{suffix}" if suffix else "",
            dir=target_dir,
            delete=False,
        ) as f:
            f.write(content)
            return DocumentRegistration(url, True, path=Path(f.name))
    except (OSError, ModuleNotFoundError) as e:
        return DocumentRegistration(url, False, error=f"Cannot read resource {resource_name}: {e}")
