"""
Custom branding extension for the Guacamole login page.

The bundle is a regular Guacamole extension: a manifest, an optional HTML
fragment with links and a translation file overriding the application
name. It is zipped into ``<home>/extensions/custom.jar`` where the
guacamole container loads it at startup.
"""

from __future__ import annotations

import html
import json
import logging
import zipfile
from pathlib import Path

from provisioner.config.models import BrandingConfig, LinkConfig, PathsConfig
from provisioner.config.settings import (
    EXTENSION_ARCHIVE,
    EXTENSION_NAME,
    EXTENSION_NAMESPACE,
    LINKS_FILE,
    LINKS_INSERT_AFTER,
    LOGGER_NAME,
    MANIFEST_FILE,
    TRANSLATIONS_DIR,
    TRANSLATIONS_FILE,
)
from provisioner.observability import log_step

logger = logging.getLogger(LOGGER_NAME)


def build_manifest(include_links: bool) -> dict:
    """
    Build the extension manifest.

    Args:
        include_links: Whether the bundle carries the HTML links fragment

    Returns:
        Manifest dict, with the ``html`` entry only when links are included
    """
    manifest: dict = {
        "guacamoleVersion": "*",
        "name": EXTENSION_NAME,
        "namespace": EXTENSION_NAMESPACE,
    }
    if include_links:
        manifest["html"] = [LINKS_FILE]
    manifest["translations"] = [f"{TRANSLATIONS_DIR}/{TRANSLATIONS_FILE}"]
    return manifest


def write_manifest(directory: Path, include_links: bool) -> Path:
    """Write ``guac-manifest.json`` into *directory*."""
    log_step("Writing Guac manifest file")
    path = directory / MANIFEST_FILE
    path.write_text(json.dumps(build_manifest(include_links), indent=2) + "\n", encoding="utf-8")
    log_step("Successfully wrote manifest for custom Guacamole branding extension")
    return path


def render_links(links: list[LinkConfig]) -> str:
    """
    Render the login page HTML fragment.

    One anchor per link, each opened in a new tab. The ``meta`` tag tells
    Guacamole where to insert the fragment.
    """
    lines = [
        f'<meta name="after" content="{LINKS_INSERT_AFTER}">',
        "",
        '<div class="welcome">',
    ]
    for link in links:
        url = html.escape(link.url, quote=True)
        label = html.escape(link.label, quote=True)
        lines.extend(["<p>", f'<a target="_blank" href="{url}">{label}</a>', "</p>"])
    lines.append("</div>")
    return "\n".join(lines) + "\n"


def write_links(directory: Path, links: list[LinkConfig]) -> Path:
    """Write the HTML links fragment into *directory*."""
    log_step("Writing Guac html extension file to add in custom URLs")
    path = directory / LINKS_FILE
    path.write_text(render_links(links), encoding="utf-8")
    log_step("Successfully wrote html for custom Guacamole branding extension")
    return path


def write_brand(directory: Path, brand_text: str) -> Path:
    """Write the translation file overriding the application name."""
    log_step("Writing Guac extension translation file with custom branding text")
    translations = directory / TRANSLATIONS_DIR
    translations.mkdir(parents=True, exist_ok=True)
    path = translations / TRANSLATIONS_FILE
    path.write_text(
        json.dumps({"APP": {"NAME": brand_text}}, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    log_step("Successfully added branding text to Guacamole login page")
    return path


def archive_bundle(directory: Path, archive: Path) -> Path:
    """
    Zip the whole bundle directory into *archive*.

    Entries are stored relative to *directory*.
    """
    archive.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in sorted(directory.rglob("*")):
            arcname = path.relative_to(directory).as_posix()
            zf.write(path, arcname)
            logger.debug(f"adding: {arcname}")
    return archive


def build_bundle(branding: BrandingConfig, paths: PathsConfig) -> Path:
    """
    Generate the branding extension and install its archive.

    Args:
        branding: Brand text and login page links
        paths: Staging and Guacamole home directories

    Returns:
        Path of the extension archive
    """
    log_step("Setting up the custom branding extension")
    staging = paths.extensions
    staging.mkdir(parents=True, exist_ok=True)

    links = branding.links
    write_manifest(staging, include_links=bool(links))
    write_brand(staging, branding.text)
    if links:
        write_links(staging, links)
    else:
        log_step("URL parameters were blank, not adding links")

    log_step("Creating jar for custom branding extension")
    return archive_bundle(staging, paths.home_extensions / EXTENSION_ARCHIVE)
