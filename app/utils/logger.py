import logging
import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


# ── column widths ─────────────────────────────────────────────────────────────
_W_SERIAL = 6
_W_DATE   = 12
_W_TIME   = 10
_W_LEVEL  = 8
_W_UID    = 32
_W_EMAIL  = 28
_W_MODULE = 28
_W_EVENT  = 48
_SEP      = " | "
_COLUMNS  = (_W_SERIAL, _W_DATE, _W_TIME, _W_LEVEL, _W_UID, _W_EMAIL, _W_MODULE, _W_EVENT)
_TOTAL_WIDTH = sum(_COLUMNS) + len(_SEP) * (len(_COLUMNS) - 1)


class StructuredFileHandler(logging.FileHandler):
    """File handler that writes one aligned row per record.

    Column layout:
        Serial | Date | Time | Level | User ID | User Email | Module/Function | Event

    User columns come from ``extra={"user_id": ..., "user_email": ...}``.
    """

    def __init__(self, log_file_path: str, title: str = "NOTES API - AUTH & ACTIVITY LOG"):
        super().__init__(log_file_path, mode="a", encoding="utf-8")
        self.title = title
        self.log_counter = self._get_next_serial_number()
        self._ensure_header_exists()

    # ── helpers ───────────────────────────────────────────────────────────────

    def _get_next_serial_number(self) -> int:
        if not os.path.exists(self.baseFilename) or os.path.getsize(self.baseFilename) == 0:
            return 1
        try:
            with open(self.baseFilename, "r", encoding="utf-8") as f:
                for line in reversed(f.readlines()):
                    first = line.split(_SEP)[0].strip()
                    if first.isdigit():
                        return int(first) + 1
        except OSError:
            pass
        return 1

    def _ensure_header_exists(self):
        if os.path.exists(self.baseFilename) and os.path.getsize(self.baseFilename) > 0:
            return
        header = _SEP.join(
            f"{label:<{width}}"
            for label, width in zip(
                ("#", "Date", "Time", "Level", "User ID", "User Email", "Module/Function", "Event"),
                _COLUMNS,
            )
        )
        with open(self.baseFilename, "w", encoding="utf-8") as f:
            f.write("=" * _TOTAL_WIDTH + "\n")
            f.write(f"{self.title:^{_TOTAL_WIDTH}}\n")
            f.write("=" * _TOTAL_WIDTH + "\n")
            f.write(header + "\n")
            f.write("-" * _TOTAL_WIDTH + "\n")

    def format_row(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        uid = str(getattr(record, "user_id", "-") or "-")
        email = str(getattr(record, "user_email", "-") or "-")

        event = record.getMessage()
        if len(event) > _W_EVENT:
            event = event[:_W_EVENT - 3] + "..."

        cells = (
            str(self.log_counter),
            dt.strftime("%Y-%m-%d"),
            dt.strftime("%H:%M:%S"),
            record.levelname,
            uid,
            email,
            f"{record.module}.{record.funcName}",
            event,
        )
        return _SEP.join(f"{cell:<{width}}" for cell, width in zip(cells, _COLUMNS))

    # ── emit ──────────────────────────────────────────────────────────────────

    def emit(self, record: logging.LogRecord):
        try:
            indent = " " * (_W_SERIAL + len(_SEP))
            with open(self.baseFilename, "a", encoding="utf-8") as f:
                f.write(self.format_row(record) + "\n")

                full_msg = record.getMessage()
                if len(full_msg) > _W_EVENT:
                    f.write(f"{indent}Details: {full_msg}\n")

                if record.exc_info:
                    tb = "".join(traceback.format_exception(*record.exc_info))
                    f.write(f"{indent}Exception: {tb}\n")

                if record.levelno >= logging.ERROR:
                    f.write("-" * _TOTAL_WIDTH + "\n")

            self.log_counter += 1
        except Exception:
            self.handleError(record)


# ── setup ─────────────────────────────────────────────────────────────────────

def setup_file_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    to_file: bool = True,
) -> logging.Logger:
    """Configure structured file + console logging.

    File handler records WARNING and above (to reduce noise).
    Console handler uses *log_level*.
    """
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )
    handlers = [console_handler]

    if to_file:
        log_file_path = Path(log_file) if log_file else Path(__file__).parent.parent / "logs" / "logs.txt"
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = StructuredFileHandler(str(log_file_path))
        file_handler.setLevel(logging.WARNING)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    logger = logging.getLogger(__name__)
    logger.info("Logging configured at %s", datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"))
    return logger


# ── helpers for callers ───────────────────────────────────────────────────────

def log_auth_event(
    event: str,
    user_id: Optional[str] = None,
    user_email: Optional[str] = None,
    level: int = logging.WARNING,
    **details,
):
    """Log an authentication event with user context.

    Defaults to WARNING so account lifecycle events reach the file log.
    Never pass OTP values or passwords in *details*.
    """
    _log = logging.getLogger("auth_events")
    extra = {"user_id": user_id or "-", "user_email": user_email or "-"}
    suffix = " ".join(f"{key}={value}" for key, value in details.items())
    _log.log(level, "AUTH %s%s", event, f" - {suffix}" if suffix else "", extra=extra)
