"""Insert a marked block into a lifecycle hook of a Podfile.

The splice point is found with a greedy pattern: from the hook's header
line through the *last* ``end`` line at the header's indentation. This is
a heuristic, not a Ruby parser. It misplaces the block when another
block at the same indentation follows the hook, or when a heredoc or
comment contains an ``end`` line at that indentation. When the header is
found but no ``end`` shares its indentation (mixed tabs and spaces), a
second hook is appended and a warning is logged; CocoaPods rejects such a
Podfile.
"""

from __future__ import annotations

import logging
import re
import textwrap
from pathlib import Path

from spmlink.podfile.templates import MARKER, MLX_CONFIGURATION, POST_INSTALL_HOOK

logger = logging.getLogger(__name__)

UPDATED = "updated"
UNCHANGED = "unchanged"
MISSING = "missing"


def _hook_pattern(hook: str) -> re.Pattern:
    return re.compile(
        r"(?P<head>^(?P<indent>[ \t]*)" + re.escape(hook) + r"[^\n]*\n[\s\S]*)"
        r"(?P<close>^(?P=indent)end\b)",
        re.MULTILINE,
    )


def _header_pattern(hook: str) -> re.Pattern:
    return re.compile(r"^[ \t]*" + re.escape(hook), re.MULTILINE)


def _as_lines(block: str) -> str:
    return block if block.endswith("\n") else block + "\n"


def new_hook_block(block: str, hook: str = POST_INSTALL_HOOK) -> str:
    """A complete hook wrapping *block*."""
    return f"{hook}\n{_as_lines(block)}end\n"


def patch_script(
    script_text: str,
    marker: str = MARKER,
    block: str = MLX_CONFIGURATION,
    hook: str = POST_INSTALL_HOOK,
) -> str:
    """Return *script_text* with *block* inserted into *hook*.

    Args:
        script_text: Current Podfile content.
        marker: Substring identifying an already-applied block. Should occur
            in *block*, otherwise every run inserts another copy.
        block: Lines to insert, indented relative to the hook body.
        hook: Header line of the hook block, e.g. ``post_install do |installer|``.

    Returns:
        The patched text, or *script_text* unchanged if it already
        contains *marker*.
    """
    if marker not in block:
        logger.warning(
            "Marker %r not found in the inserted block; re-patching will insert it again",
            marker,
        )
    if marker in script_text:
        return script_text

    match = _hook_pattern(hook).search(script_text)
    if match:
        splice_at = match.start("close")
        inserted = textwrap.indent(_as_lines(block), match.group("indent"))
        return script_text[:splice_at] + inserted + script_text[splice_at:]

    if _header_pattern(hook).search(script_text):
        logger.warning(
            "Found %r but no closing end at the same indentation; appending a second hook",
            hook,
        )
    if not script_text.strip():
        return new_hook_block(block, hook)
    return script_text.rstrip("\n") + "\n\n" + new_hook_block(block, hook)


def patch_podfile(
    path: Path | str,
    marker: str = MARKER,
    block: str = MLX_CONFIGURATION,
    hook: str = POST_INSTALL_HOOK,
    dry_run: bool = False,
) -> str:
    """Patch the Podfile at *path* in place.

    A missing Podfile is not an error: before ``pod install`` has been set
    up there is nothing to patch.

    Returns:
        ``"missing"``, ``"unchanged"``, or ``"updated"``.
    """
    podfile = Path(path)
    if not podfile.exists():
        logger.info("No Podfile at %s, skipping", podfile)
        return MISSING

    content = podfile.read_text()
    new_content = patch_script(content, marker, block, hook)
    if new_content == content:
        logger.info("Podfile already configured")
        return UNCHANGED

    if not dry_run:
        podfile.write_text(new_content)
        logger.info("Added configuration to Podfile %s hook", hook.split()[0])
    return UPDATED
