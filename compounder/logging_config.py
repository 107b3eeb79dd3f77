"""
Logging for compound runs

Everything logs under the "compounder" logger. setup_logging() attaches:
  - console: colored, one block per record with step context
  - compounder.log / errors.log: the same text without color, rotating
  - compounder.json: one JSON object per record
  - transactions.log: one line per mined (or reverted) transaction
"""

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any

ROOT_LOGGER = "compounder"

# Keyword context accepted by CompounderLogger and copied into the JSON log
CONTEXT_FIELDS = ('step', 'pid', 'tx_hash', 'gas_used', 'status')

LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
RESET = '\033[0m'

def _context(record: logging.LogRecord) -> Dict[str, Any]:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}

class StructuredFormatter(logging.Formatter):
    """JSON structured logging formatter"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)

class RunFormatter(logging.Formatter):
    """Human-readable formatter, optionally colored"""

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        level = record.levelname.ljust(8)
        if self.use_color and record.levelname in LEVEL_COLORS:
            level = f"{LEVEL_COLORS[record.levelname]}{level}{RESET}"

        lines = [f"[{timestamp}] {level} {record.name} - {record.getMessage()}"]

        context = _context(record)
        if context:
            lines.append("  " + " | ".join(f"{k}={v}" for k, v in context.items()))
        if record.exc_info:
            lines.append(self.formatException(record.exc_info))

        return '\n'.join(lines)

def _rotating(path: Path, level: int, formatter: logging.Formatter,
              max_mb: int, backups: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_mb * 1024 * 1024, backupCount=backups, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler

class CompounderLogger:
    """Logger wrapper that takes step context as keyword arguments"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.tx_logger = logging.getLogger(f"{ROOT_LOGGER}.transactions")
        self._setup_done = False

    def setup(self, config: Dict[str, Any]):
        """Attach the run's handlers; later calls are no-ops"""
        if self._setup_done:
            return

        log_dir = Path(config.get('logDir', 'data/logs'))
        log_dir.mkdir(parents=True, exist_ok=True)
        console_level = getattr(logging, config.get('logLevel', 'INFO'), logging.INFO)

        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()

        console = logging.StreamHandler()
        console.setLevel(console_level)
        console.setFormatter(RunFormatter(use_color=True))
        self.logger.addHandler(console)

        plain = RunFormatter(use_color=False)
        self.logger.addHandler(_rotating(log_dir / "compounder.log", logging.DEBUG, plain, 10, 10))
        self.logger.addHandler(_rotating(log_dir / "errors.log", logging.ERROR, plain, 5, 5))
        self.logger.addHandler(_rotating(log_dir / "compounder.json", logging.DEBUG, StructuredFormatter(), 10, 5))

        tx_handler = logging.FileHandler(log_dir / "transactions.log", encoding='utf-8')
        tx_handler.setFormatter(logging.Formatter('%(asctime)s | %(message)s', datefmt='%Y-%m-%d %H:%M:%S'))
        self.tx_logger.handlers.clear()
        self.tx_logger.setLevel(logging.INFO)
        self.tx_logger.addHandler(tx_handler)
        self.tx_logger.propagate = False

        self._setup_done = True
        self.logger.debug(f"Logging to {log_dir} (console level {config.get('logLevel', 'INFO')})")

    def log_transaction(self, step: str, tx_hash: str, gas_used: int, status: str):
        """Record a mined transaction in transactions.log and the main logs"""
        self.tx_logger.info(f"STEP={step} | TX={tx_hash} | GAS={gas_used} | STATUS={status}")
        self.logger.info(f"{step} {status}",
                         extra={'step': step, 'tx_hash': tx_hash, 'gas_used': gas_used, 'status': status})

    def info(self, msg: str, **kwargs):
        self.logger.info(msg, extra=kwargs)

    def error(self, msg: str, exc_info: bool = False, **kwargs):
        self.logger.error(msg, exc_info=exc_info, extra=kwargs)

compounder_logger = CompounderLogger(ROOT_LOGGER)

def setup_logging(config: Dict[str, Any]):
    """Initialize the logging system"""
    compounder_logger.setup(config)

def get_logger(name: str) -> CompounderLogger:
    """Get a logger under the compounder hierarchy"""
    return CompounderLogger(name)
