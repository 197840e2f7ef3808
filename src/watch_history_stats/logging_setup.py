import logging
import sys

class ColorFormatter(logging.Formatter):
    """Custom formatter with colors for terminal output."""

    COLORS = {
        "DEBUG": "\033[90m",
        "INFO": "\033[97m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[95m",
    }
    RESET = "\033[0m"

    ICONS = {
        "DEBUG": "   ",
        "INFO": " \033[94m>\033[0m ",
        "WARNING": " \033[93m!\033[0m ",
        "ERROR": " \033[91mX\033[0m ",
        "CRITICAL": " \033[95m!!\033[0m ",
    }

    def format(self, record):
        msg = record.getMessage()

        if msg == "report_built":
            return None
        elif msg == "files_loading":
            count = getattr(record, "count", 0)
            return f"\033[36m🔄\033[0m Reading \033[1m{count}\033[0m file(s)..."
        elif msg == "payloads_decoded":
            payloads = getattr(record, "payloads", 0)
            events = getattr(record, "events", 0)
            return f"\033[92m✓\033[0m Decoded \033[1m{events}\033[0m watch events from {payloads} file(s)"
        elif msg == "records_skipped":
            timestamps = getattr(record, "timestamps", 0)
            urls = getattr(record, "urls", 0)
            return (
                f"\033[93m⚠\033[0m Skipped records in derived stats "
                f"(bad timestamps: {timestamps}, bad URLs: {urls})"
            )
        elif msg == "decode_failed":
            reason = getattr(record, "reason", "Unknown error")
            return f"\033[91mX\033[0m Could not decode watch history: {reason}"
        elif msg == "empty_input":
            return f"\033[91mX\033[0m The uploaded files contain no watch events."
        elif msg == "config_invalid":
            reason = getattr(record, "reason", "Unknown error")
            return f"\033[91mX\033[0m Invalid configuration: {reason}"

        icon = self.ICONS.get(record.levelname, "   ")
        return f"{icon}{msg}"


class NoNoneFilter(logging.Filter):
    def filter(self, record):
        formatted = ColorFormatter().format(record)
        return formatted is not None

def configure_logging(level: str, stream=None) -> None:
    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(ColorFormatter())
    console_handler.addFilter(NoNoneFilter())

    logging.root.handlers = []
    logging.root.addHandler(console_handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
