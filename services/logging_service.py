# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.
#
# Services Module - Logging Service

import logging

from utils.path_helpers import get_app_dir

LOGGER_NAME = 'AwakeReader'


class LoggingService:
    """
    Centralized logging service

    Configures the root handlers once (file + console) and hands out the
    'AwakeReader' logger every module writes to.
    """

    def __init__(self, log_file: str = None, log_level: int = logging.INFO):
        """
        Initialize logging service

        Args:
            log_file: Path to log file (default: awake_reader.log in the app dir)
            log_level: Logging level (default: INFO)
        """
        if log_file is None:
            log_file = get_app_dir() / 'awake_reader.log'

        self.log_file = str(log_file)
        self.log_level = log_level
        self.logger = None
        self._setup_logging()

    def _setup_logging(self):
        """Setup logging with file and console handlers"""
        logging.basicConfig(
            level=self.log_level,
            format='%(asctime)s | %(levelname)s | %(message)s',
            handlers=[
                logging.FileHandler(self.log_file, encoding='utf-8'),
                logging.StreamHandler()
            ]
        )
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(self.log_level)

    def get_logger(self):
        """Get the logger instance"""
        return self.logger
