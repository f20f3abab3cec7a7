import logging
import os
from datetime import datetime
from logging import WARNING, FileHandler
from logging.handlers import TimedRotatingFileHandler

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class GetLog:
    logger = None
    log_folder = None
    handlers = []

    @classmethod
    def get_log(cls, log_folder=None, level="info"):
        """Get logger and initialize logging system.

        Args:
            log_folder (str): Folder for log files. Defaults to a timestamped
                folder under ./logs
            level (str): Level name for the main file and console handlers
        """
        if cls.logger is None:
            if log_folder:
                cls.log_folder = log_folder
            else:
                current_time = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
                cls.log_folder = os.path.join("./logs", current_time)
                os.environ["IHAPERF_TIMESTAMP"] = current_time

            if not os.path.exists(cls.log_folder):
                os.makedirs(cls.log_folder)

            log_level = LOG_LEVELS.get(str(level).lower(), logging.INFO)

            cls.logger = logging.getLogger()
            cls.logger.setLevel(log_level)

            fmt = "%(asctime)s %(levelname)s [%(name)s] [%(filename)s (%(funcName)s:%(lineno)d)] - %(message)s"
            fm = logging.Formatter(fmt)

            # main log file
            th = TimedRotatingFileHandler(
                filename=os.path.join(cls.log_folder, "log.log"),
                when="midnight",
                interval=1,
                backupCount=3,
                encoding="utf-8",
            )
            th.setLevel(log_level)
            th.setFormatter(fm)
            cls.logger.addHandler(th)

            # warnings and errors only
            error_handler = FileHandler(filename=os.path.join(cls.log_folder, "error.log"), encoding="utf-8")
            error_handler.setLevel(WARNING)
            error_handler.setFormatter(fm)
            cls.logger.addHandler(error_handler)

            console_handler = logging.StreamHandler()
            console_handler.setLevel(log_level)
            console_handler.setFormatter(fm)
            cls.logger.addHandler(console_handler)

            cls.handlers = [th, error_handler, console_handler]

        return cls.logger

    @classmethod
    def reset(cls):
        """Detach and close the handlers installed by get_log."""
        if cls.logger is not None:
            for handler in cls.handlers:
                cls.logger.removeHandler(handler)
                handler.close()
        cls.handlers = []
        cls.logger = None
        cls.log_folder = None
