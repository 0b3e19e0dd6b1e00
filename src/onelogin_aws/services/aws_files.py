"""Writers for the shared AWS ``credentials`` and ``config`` files.

Only the lines of the target section are touched. Comments, key case and
every other section are written back exactly as they were read.
"""

from __future__ import annotations

import configparser
import logging
import os
import re
from pathlib import Path

from onelogin_aws.utils.errors import ConfigError

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^\s*\[(?P<name>[^\]]+)\]")
_COMMENT_PREFIXES = ("#", ";")


def _validate(path: Path, text: str) -> None:
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str
    try:
        parser.read_string(text, source=str(path))
    except configparser.Error as e:
        raise ConfigError(f"Cannot update AWS file {path}: {e}") from e


def _section_name(line: str) -> str | None:
    match = _SECTION_RE.match(line)
    return match.group("name").strip() if match else None


def _option_key(line: str) -> str | None:
    # Indented lines continue the previous value
    if not line or line[0].isspace() or line.startswith(_COMMENT_PREFIXES):
        return None
    key, sep, _ = line.partition("=")
    return key.strip() if sep else None


def _update_lines(lines: list[str], section: str, options: dict[str, str]) -> list[str]:
    pending = {key.lower(): (key, value) for key, value in options.items()}
    lines = list(lines)

    start = next((i for i, line in enumerate(lines) if _section_name(line) == section), None)
    if start is None:
        if lines and lines[-1].strip():
            lines.append("")
        lines.append(f"[{section}]")
        lines.extend(f"{key} = {value}" for key, value in pending.values())
        return lines

    end = start + 1
    while end < len(lines) and _section_name(lines[end]) is None:
        key = _option_key(lines[end])
        if key is not None and key.lower() in pending:
            new_key, value = pending.pop(key.lower())
            lines[end] = f"{new_key} = {value}"
        end += 1

    # New keys go after the section's last non-blank line
    insert_at = end
    while insert_at > start + 1 and not lines[insert_at - 1].strip():
        insert_at -= 1
    lines[insert_at:insert_at] = [f"{key} = {value}" for key, value in pending.values()]
    return lines


def _update_ini(path: Path, section: str, options: dict[str, str]) -> None:
    """Set ``options`` in ``section``, keeping every other line as it is."""
    try:
        text = path.read_text() if path.exists() else ""
    except OSError as e:
        raise ConfigError(f"Cannot read AWS file {path}: {e}") from e
    _validate(path, text)

    lines = _update_lines(text.splitlines(), section, options)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n")
        os.chmod(path, 0o600)
    except OSError as e:
        raise ConfigError(f"Cannot write AWS file {path}: {e}") from e
    logger.info(f"Updated [{section}] in {path}")


def config_section(profile: str) -> str:
    """``~/.aws/config`` names non-default profiles ``profile <name>``."""
    return "default" if profile == "default" else f"profile {profile}"


class AWSCredentialsFile:
    """``{aws_dir}/credentials``"""

    def __init__(self, aws_dir: Path, profile: str) -> None:
        self.path = Path(aws_dir) / "credentials"
        self._profile = profile

    def save(self, options: dict[str, str]) -> None:
        _update_ini(self.path, self._profile, options)


class AWSConfigFile:
    """``{aws_dir}/config``"""

    def __init__(self, aws_dir: Path, profile: str) -> None:
        self.path = Path(aws_dir) / "config"
        self._profile = profile

    def save_region(self, region: str) -> None:
        _update_ini(self.path, config_section(self._profile), {"region": region})
