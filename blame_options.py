# blame_options.py
import configparser
import dataclasses
from dataclasses import dataclass

from blame_errors import ErrorLevel, OperationResult
from blame_logging import get_logger

logger = get_logger()

CONFIG_SECTION = "console_blame"


@dataclass(frozen=True)
class BlameOptions:
    """
    Output options of a ConsoleBlame instance.

    line_format: template of a source row, fields {line} and {code}
    path_format: template of the location row, fields {file}, {line} and {column}
    context_size: number of lines printed before and after the call site
    sources: print the source window at all?
    """
    line_format: str = "{line} | {code}"
    path_format: str = "{file}:{line}:{column}"
    context_size: int = 3
    sources: bool = True

    def __post_init__(self):
        if not isinstance(self.context_size, int) or isinstance(self.context_size, bool):
            raise TypeError(f"context_size must be an int, got {type(self.context_size).__name__}")
        if self.context_size < 0:
            raise ValueError(f"context_size must be non-negative, got {self.context_size}")

    def merge(self, **partial) -> "BlameOptions":
        """Overlay the given keys, keep everything else. Unknown keys raise TypeError."""
        return dataclasses.replace(self, **partial)

    def trace_options(self) -> dict:
        return {"sources": self.sources, "context_size": self.context_size}


def read_config_file(config_file: str, current: BlameOptions) -> tuple[OperationResult, dict]:
    """
    Read the [console_blame] section of an .ini file.

    Returns (result, overrides). Values missing from the file fall back to the
    current options, so the overrides dict can be merged as a whole.
    """
    try:
        config = configparser.ConfigParser(interpolation=None)
        files_read = config.read(config_file, encoding="utf8")
        if not files_read:
            return (False, f"Configuration file not found: {config_file}", ErrorLevel.RECOVERABLE), {}

        if not config.has_section(CONFIG_SECTION):
            logger.warning(f"⚠️ No [{CONFIG_SECTION}] section in {config_file}, keeping defaults")
            return (True, None, None), {}

        overrides = {
            "line_format": config.get(CONFIG_SECTION, "line_format", fallback=current.line_format),
            "path_format": config.get(CONFIG_SECTION, "path_format", fallback=current.path_format),
            "context_size": config.getint(CONFIG_SECTION, "context_size", fallback=current.context_size),
            "sources": config.getboolean(CONFIG_SECTION, "sources", fallback=current.sources),
        }
        if config.has_option(CONFIG_SECTION, "colors"):
            overrides["colors"] = config.getboolean(CONFIG_SECTION, "colors")

        # Validate before handing the values over
        current.merge(**{k: v for k, v in overrides.items() if k != "colors"})

        logger.info(f"✅ Configuration loaded from {config_file}")
        return (True, None, None), overrides

    except (configparser.Error, ValueError, TypeError) as e:
        return (False, f"Configuration failed: {e}", ErrorLevel.FATAL), {}
