# techmarket/utils/log.py
# Event logging

import os
import datetime
import logging
from aiologger import Logger
from aiologger.handlers.files import AsyncFileHandler

from techmarket.config import settings

class Log:
    def __init__(self, log_dir: str | None = None):
        self.log_dir = log_dir or settings.LOG_DIR
        os.makedirs(self.log_dir, exist_ok=True)
        self.handlers = {}
        self.log_print = settings.LOG_PRINT.lower() in ("1", "true", "yes")

    def build_log_path(self, now: datetime.datetime) -> str:
        """
        One file per day:
        log/2025/10/04.log
        """
        base_dir = os.path.join(self.log_dir, f"{now.year}", f"{now:%m}")
        os.makedirs(base_dir, exist_ok=True)
        return os.path.join(base_dir, f"{now:%d}.log")

    async def get_logger(self, target: str, now: datetime.datetime) -> Logger:
        """Async logger for target, reopened when the day changes."""
        log_path = self.build_log_path(now)

        if target not in self.handlers or self.handlers[target]["path"] != log_path:
            handler = AsyncFileHandler(filename=log_path, mode="a", encoding="utf-8")
            target_logger = Logger(name=f"techmarket_{target}")
            target_logger.add_handler(handler)

            if target in self.handlers:
                await self.handlers[target]["logger"].shutdown()

            self.handlers[target] = {
                "path": log_path,
                "logger": target_logger,
            }

        return self.handlers[target]["logger"]

    def format_line(self, now: datetime.datetime, target: str, message: str, data: dict | None) -> str:
        line = f"{now:%d.%m.%Y %H:%M:%S} {target}: {message}"
        if data:
            line += f": {self.safe_serialize(data)}"
        return line

    # async
    async def log_info(
        self,
        target: str = "",
        message: str = "",
        data: dict | None = None,
        is_console: bool = None,
    ):
        now = datetime.datetime.now()
        line = self.format_line(now, target, message, data)

        target_logger = await self.get_logger(target, now)
        await target_logger.info(line)

        should_print = self.log_print if is_console is None else is_console
        if should_print:
            print(line)

    async def log_warning(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        await self.log_info(target, f"WARNING: {message}", data, is_console)

    async def log_error(
        self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = True
    ):
        await self.log_info(target, f"ERROR: {message}", data, is_console)

    # sync, for boot before the event loop owns the logger
    def log_info_sync(
        self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None
    ):
        now = datetime.datetime.now()
        log_path = self.build_log_path(now)
        line = self.format_line(now, target, message, data)

        logger = logging.getLogger(f"techmarket_sync_{target}")
        logger.setLevel(logging.INFO)
        logger.propagate = False

        if not logger.handlers:
            handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            logger.addHandler(handler)

        logger.info(line)

        should_print = self.log_print if is_console is None else is_console
        if should_print:
            print(line)

    def safe_serialize(self, obj):
        """
        Convert obj into something printable:
        - dict, list, tuple recursively
        - pydantic models via model_dump
        - ORM rows via their public attributes
        - anything else as a type tag
        """
        if obj is None:
            return None
        elif isinstance(obj, (str, int, float, bool)):
            return obj
        elif isinstance(obj, dict):
            return {k: self.safe_serialize(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple, set)):
            return [self.safe_serialize(v) for v in obj]
        elif isinstance(obj, (datetime.datetime, datetime.date)):
            return obj.isoformat()
        elif hasattr(obj, "model_dump"):
            return self.safe_serialize(obj.model_dump())
        elif hasattr(obj, "__dict__"):
            return {k: self.safe_serialize(v) for k, v in vars(obj).items() if not k.startswith("_")}
        else:
            return f"<{type(obj).__name__}>"

    async def shutdown(self):
        for h in list(self.handlers.values()):
            await h["logger"].shutdown()
        self.handlers = {}
