"""Mapping of PKGBUILD metadata variables to recipe statements."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from pkgbuild_convert.errors import ChecksumError
from pkgbuild_convert.recipe.literals import ruby_string

if TYPE_CHECKING:
    from pkgbuild_convert.console import StatusCallback
    from pkgbuild_convert.core.declarations import Declaration
    from pkgbuild_convert.recipe.document import RecipeDocument

logger = logging.getLogger(__name__)

# Variables with a defined meaning in a PKGBUILD
METADATA_NAMES = frozenset(
    {
        "pkgbase",
        "pkgname",
        "pkgver",
        "pkgrel",
        "epoch",
        "pkgdesc",
        "arch",
        "url",
        "license",
        "groups",
        "depends",
        "makedepends",
        "checkdepends",
        "optdepends",
        "provides",
        "conflicts",
        "replaces",
        "backup",
        "options",
        "install",
        "changelog",
        "source",
        "noextract",
        "validpgpkeys",
        "md5sums",
        "sha1sums",
        "sha256sums",
        "sha224sums",
        "sha384sums",
        "sha512sums",
        "b2sums",
    }
)

OPERATOR_PATTERN = re.compile(r"^[<>=]+")

# Architecture names that differ between the two formats
ARCH_ALIASES = {"any": "all"}


def strip_operators(dependency: str) -> str:
    """Remove a leading run of comparison operators.

    Examples:
        >>> strip_operators(">=bar-1")
        'bar-1'
        >>> strip_operators("foo")
        'foo'
    """
    return OPERATOR_PATTERN.sub("", dependency)


def source_location(entry: str) -> str:
    """Return the URL part of a source entry, dropping a ``name::`` prefix."""
    return entry.split("::", 1)[-1]


class KeywordMapper:
    """Emits recipe statements for recognized metadata variables."""

    def __init__(
        self,
        checksum: Callable[[str], str] | None = None,
        fetch: bool = True,
        status: StatusCallback | None = None,
    ) -> None:
        """Initialize the mapper.

        Args:
            checksum: Returns the SHA-256 of a source URL
            fetch: Whether a checksum may be derived by downloading the source
            status: Receives user-facing progress messages
        """
        self.checksum = checksum
        self.fetch = fetch and checksum is not None
        self.status = status

    def handles(self, name: str) -> bool:
        """Check if a variable name is PKGBUILD metadata."""
        return name in METADATA_NAMES

    def apply(self, declaration: Declaration, document: RecipeDocument) -> None:
        """Append the recipe statements for a metadata declaration."""
        name = declaration.name
        elements = declaration.elements

        match name:
            case "pkgname":
                if elements:
                    document.set_package_name(elements[0])
            case "pkgver":
                document.append(f"version {ruby_string(declaration.scalar)}")
            case "arch":
                arches = [ARCH_ALIASES.get(arch, arch) for arch in elements]
                document.append(f"compatibility {ruby_string(', '.join(arches))}")
            case "url":
                document.append(f"homepage {ruby_string(declaration.scalar)}")
            case "license":
                document.append(f"license {ruby_string(', '.join(elements))}")
            case "pkgdesc":
                document.append(f"description {ruby_string(declaration.scalar)}")
            case "depends":
                for dependency in elements:
                    document.append(f"depends_on {ruby_string(strip_operators(dependency))}")
            case "source":
                # Recipes carry a single source
                if not elements:
                    logger.warning("Empty source array; no source_url emitted")
                    return
                url = source_location(elements[0])
                document.source_url = url
                document.append(f"source_url {ruby_string(url)}")
            case _ if name.endswith("sums"):
                self._apply_checksum(declaration, document)
            case _:
                logger.debug("No recipe equivalent for %s; dropped", name)

    def _apply_checksum(self, declaration: Declaration, document: RecipeDocument) -> None:
        # The line goes where the first checksum array appears; its value is
        # settled by finalize() once every array has been seen
        document.reserve_checksum_slot()

        if declaration.name != "sha256sums":
            return
        if document.checksum is not None:
            logger.debug("sha256sums already seen; ignoring later value")
            return

        elements = declaration.elements
        if not elements:
            logger.debug("Empty sha256sums array")
            return
        document.checksum = elements[0]

    def finalize(self, document: RecipeDocument) -> None:
        """Write the ``source_sha256`` line once all statements are converted.

        A given ``sha256sums`` value always wins; otherwise the digest is
        derived from the recorded source URL.

        Raises:
            ChecksumError: If a digest must be derived but no source URL was recorded
        """
        if document.checksum_slot is None:
            return

        digest = document.checksum
        if digest is None:
            digest = self.derive_checksum(document)

        document.fill_checksum_slot(None if digest is None else f"source_sha256 {ruby_string(digest)}")

    def derive_checksum(self, document: RecipeDocument) -> str | None:
        """Compute the source checksum by downloading the recorded source URL.

        Returns:
            The hex digest, or None when fetching is disabled

        Raises:
            ChecksumError: If no source URL has been recorded
        """
        if not self.fetch or self.checksum is None:
            logger.warning("Checksum fetching disabled; no source_sha256 emitted")
            return None

        if not document.source_url:
            raise ChecksumError("Cannot derive a checksum: no source URL recorded")

        url = document.expand(document.source_url)
        if self.status:
            self.status("progress", "Generating sha256sum...")
        return self.checksum(url)
