"""
Logging utilities for the wire image preparation.

Includes:
- setup logger
- close logger
"""
from datetime import datetime
import logging
from logging import handlers as log_handlers
import os
import shutil



# ------------------------------------------------------------
# Logging utils
# ------------------------------------------------------------

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

DATETIME_FORMAT = "%d.%m.%Y %H:%M:%S"


class DuplicateFilter(logging.Filter):
    """ Drop a message repeated within `filter_time` seconds, except in debug mode."""

    def __init__(self, formatter, logger, filter_time: int = 1):
        super().__init__()
        self.msgs = {}
        self.formatter = formatter
        self.logger = logger
        self.filter_time = filter_time

    def filter(self, record):
        self.formatter.format(record)
        if self.logger.level == logging.DEBUG:
            return True
        msg = record.threadName + " " + str(record.msg)
        now = datetime.strptime(record.asctime, DATETIME_FORMAT)

        # Forget messages that can no longer be duplicates
        self.msgs = {
            key: seen for key, seen in self.msgs.items()
            if (now - seen).total_seconds() < self.filter_time
        }
        if msg in self.msgs:
            return False
        self.msgs[msg] = now
        return True



def setup_logger(filename, logging_filter_time: int=1,
                 str_handler=None, when: str='D',
                 backup_count: int=1, log_level="info",
                 archive_logs: bool=False, log_folder="logs"):
    """
    Create a logger writing to the console and to a rotating file.

    Parameters
    ----------
    filename : str
        Name of the log file inside log_folder
    logging_filter_time : int
        Identical messages within this many seconds are dropped
    str_handler : io.StringIO
        Optional stream that receives the messages as well (for tests)
    when, backup_count :
        Rotation settings of the file handler
    log_level : str
        'debug', 'info', 'warning' or 'error'
    archive_logs : bool
        Move existing log files to <log_folder>/old first
    log_folder : str
        Directory of the log files

    Returns
    -------
    logging.Logger
    """
    log_formatter = logging.Formatter("%(asctime)s [%(levelname)-7.7s] [%(threadName)-14s]   %(message)s", DATETIME_FORMAT)

    archive_folder = os.path.join(log_folder, "old")
    os.makedirs(log_folder, exist_ok=True)
    os.makedirs(archive_folder, exist_ok=True)

    # Archive old logs
    if archive_logs:
        for f in os.listdir(log_folder):
            src = os.path.join(log_folder, f)
            if not os.path.isdir(src):
                shutil.move(src, os.path.join(archive_folder, f))

    filepath = os.path.join(log_folder, filename)
    file_handler = log_handlers.TimedRotatingFileHandler(filepath, encoding="UTF-8", when=when, backupCount=backup_count)
    file_handler.setFormatter(log_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)

    logger = logging.getLogger(filepath)
    logger.propagate = False

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    # Lets tests read the messages without opening the log file
    if str_handler:
        str_handler = logging.StreamHandler(str_handler)
        str_handler.setFormatter(log_formatter)
        logger.addHandler(str_handler)

    logger.setLevel(LOG_LEVELS[log_level.lower()])
    logger.addFilter(DuplicateFilter(log_formatter, logger, logging_filter_time))
    return logger



def close_log_handlers(log):
    handlers = log.handlers[:]
    for handler in handlers:
        handler.close()
        log.removeHandler(handler)
