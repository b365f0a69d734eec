"""
Logger setup and configuration.
"""

import logging
import logging.config
import sys
from pathlib import Path
import yaml


class BrokenPipeHandler(logging.StreamHandler):
    """Custom logging handler that gracefully handles broken pipe errors."""

    def emit(self, record):
        """Emit a record, handling broken pipe errors gracefully."""
        try:
            super().emit(record)
        except BrokenPipeError:
            # Pipe was closed (e.g., output piped to head), exit gracefully
            sys.exit(0)
        except OSError as e:
            if e.errno == 32:  # Broken pipe
                sys.exit(0)
            else:
                raise


def build_logging_config(level=logging.INFO, log_file: str = "logs/cost_center_sync.log") -> dict:
    """Build the default dictConfig: console on stderr plus a rotating debug file."""
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'detailed': {
                'format': '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': {
            'console': {
                'level': level,
                'class': 'cost_center_sync.logger_setup.BrokenPipeHandler',
                'formatter': 'standard',
                # stdout carries the result line
                'stream': 'ext://sys.stderr'
            },
            'file': {
                'level': 'DEBUG',
                'class': 'logging.handlers.RotatingFileHandler',
                'formatter': 'detailed',
                'filename': log_file,
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }
        },
        'loggers': {
            '': {  # root logger
                'handlers': ['console', 'file'],
                'level': level,
                'propagate': False
            },
            'urllib3': {
                'level': 'WARNING'
            }
        }
    }


def setup_logging(level=logging.INFO, log_file: str = "logs/cost_center_sync.log", config_file=None):
    """Setup logging configuration."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if config_file and Path(config_file).exists():
        # Load logging config from file
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
        logging.config.dictConfig(config)
        return

    # Create logs directory
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(level, log_file))
