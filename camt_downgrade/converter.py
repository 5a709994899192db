#!/usr/bin/env python3

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from camt_downgrade.config import ConverterConfig
from camt_downgrade.parser import parse_camt_10
from camt_downgrade.schema import SOURCE_VERSION, TARGET_VERSION
from camt_downgrade.transformer import serialize, to_camt_08

logger = logging.getLogger(__name__)


def convert(data: bytes, config: ConverterConfig | None = None) -> bytes:
    """Converts a camt.053.001.10 document into a camt.053.001.08 document.

    The result depends on nothing but ``data`` and ``config``: converting the
    same input twice yields the same bytes.

    Raises:
      ConversionError: If the input cannot be converted. No partial output
        is ever returned.
    """
    config = config or ConverterConfig()
    statement = parse_camt_10(data)
    output = serialize(to_camt_08(statement), indent_width=config.indent)
    logger.info(
        f"Converted message {statement.message_id} "
        f"from {SOURCE_VERSION} to {TARGET_VERSION}"
    )
    return output


def default_file_mode() -> int:
    """The mode a plain ``open(path, "w")`` would give a new file."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def output_path_for(path: Path, suffix: str = "_08") -> Path:
    return path.with_name(f"{path.stem}{suffix}.xml")


def convert_file(
    path: Path, output: Path | None = None, config: ConverterConfig | None = None
) -> Path:
    """Converts the file at ``path`` and writes the result next to it.

    The output is written to a temporary file first and renamed into place,
    so a failed conversion never leaves a partial artifact behind.

    Args:
      path: The camt.053.001.10 file to convert.
      output: Where to write the result. Defaults to ``<stem>_08.xml`` next
        to the input, with the suffix taken from the config.
      config: Formatting and output options.
    Returns:
      The path of the written file.
    """
    config = config or ConverterConfig()
    path = Path(path)
    output = Path(output) if output is not None else output_path_for(
        path, config.output_suffix
    )
    logger.info(f"Converting {path} to {output}")

    converted = convert(path.read_bytes(), config=config)

    fd, tmp_name = tempfile.mkstemp(
        dir=output.parent, prefix=f".{output.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(converted)
        os.chmod(tmp_name, default_file_mode())
        os.replace(tmp_name, output)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return output
