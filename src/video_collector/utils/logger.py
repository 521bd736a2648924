import logging
import sys
from pathlib import Path

def setup_logger(
  name: str = "video_collector",
  log_file: str = "logs/video_collector.log",
  level: str = "INFO"
):
  """
  Simple one-level logger setup
  
  Args:
    name: Logger name
    log_file: Path to log file, None to log to console only
    level: Log level (DEBUG, INFO, WARNING, ERROR)
  """
  logger = logging.getLogger(name)
  logger.setLevel(getattr(logging, level.upper()))
  
  # Clear existing handlers
  logger.handlers.clear()
  
  # Console handler
  console_handler = logging.StreamHandler(sys.stdout)
  console_format = logging.Formatter(
    "%(asctime)s - %(levelname)s - %(threadName)s - %(message)s",
    datefmt="%H:%M:%S"
  )
  console_handler.setFormatter(console_format)
  logger.addHandler(console_handler)
  
  if log_file:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_format = logging.Formatter(
      "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
      datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)
  
  return logger

# Global logger instance
logger = logging.getLogger("video_collector")
