import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from bridge_core.config.settings import settings

ROOT_LOGGER_NAME = "bridge_core"


class JsonFormatter(logging.Formatter):
    """每条日志输出一行 JSON，extra={"extra": {...}} 中的字段会被平铺进去。"""

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if settings.log_redact_content:
            msg = (msg or "")[:64]
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "msg": msg,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if getattr(logger, "_bridge_configured", False):
        return logger
    logger.setLevel(settings.log_level)
    if settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / "bridge.log", encoding="utf-8")
        fh.setLevel(settings.log_level)
        fh.setFormatter(JsonFormatter())
        logger.addHandler(fh)
    logger._bridge_configured = True  # type: ignore[attr-defined]
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """返回 bridge_core 根 logger 的子 logger（首次调用时完成初始化）。"""

    root = setup_logger()
    if not name or name == ROOT_LOGGER_NAME:
        return root
    if name.startswith(ROOT_LOGGER_NAME + "."):
        name = name[len(ROOT_LOGGER_NAME) + 1:]
    return root.getChild(name)
