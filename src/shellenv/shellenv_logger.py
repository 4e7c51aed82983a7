"""
Multi-purpose logger used by shellenv. Every line is emitted as a JSON record.
"""

import inspect
import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class LogLine(BaseModel):
    """
    Represents a line in the shellenv log
    """

    time: str
    level: str
    caller_file: str
    caller_name: str
    caller_line: int
    message: str


class ShellEnvLogger:
    """
    Logger class
    """

    def __init__(self, level: Optional[int] = None) -> None:
        """
        Wrap the `shellenv` logger. Its level is only changed when `level`
        is given.
        """
        self.logger = logging.getLogger("shellenv")
        if level is not None:
            self.logger.setLevel(level)

    def log(self, debug_message: str, level: int) -> None:
        """
        Log the message as a JSON line, tagged with the caller's location
        """
        if not self.logger.isEnabledFor(level):
            return

        debug_message = debug_message.replace("\n", " ")

        calframe = inspect.getouterframes(inspect.currentframe(), 2)
        caller_file = calframe[1][1].split("/")[-1]
        caller_line = calframe[1][2]
        caller_name = calframe[1][3]

        log_line = LogLine(
            time=str(datetime.now()),
            level=logging.getLevelName(level),
            caller_file=caller_file,
            caller_name=caller_name,
            caller_line=caller_line,
            message=debug_message,
        )

        self.logger.log(level=level, msg=log_line.model_dump_json())
