#!/usr/bin/env python3
"""
Typopp Configuration & Logging Module
=====================================
Centralized configuration, structured logging, error taxonomy and
request-level security utilities for the Typopp backend.

Version: reads from version.json
"""

import os
import re
import sys
import json
import logging
import uuid
import time
import functools
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Callable
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_MAX_UPLOAD_MB = 10          # Matches the 10mb JSON body limit of the web client
MAX_SAFE_UPLOAD_MB = 100            # Maximum safe upload limit in megabytes
DEFAULT_RATE_LIMIT_REQUESTS = 100   # Requests per window per client address
DEFAULT_RATE_LIMIT_WINDOW = 900     # 15 minute window, in seconds
DEFAULT_HTTP_TIMEOUT = 15           # Seconds for upstream Google API calls
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                # Number of log backup files to keep

DEFAULT_MAX_UPLOAD_BYTES = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024
MAX_SAFE_UPLOAD_BYTES = MAX_SAFE_UPLOAD_MB * 1024 * 1024

# =============================================================================
# VERSION - Read from version.json (Single Source of Truth)
# =============================================================================
def _load_version():
    """Load version from version.json file."""
    try:
        version_file = Path(__file__).parent / 'version.json'
        if version_file.exists():
            with open(version_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
                return data.get('version', '1.0.0')
    except (OSError, ValueError):
        pass
    return '1.0.0'

__version__ = _load_version()
VERSION = __version__
APP_NAME = "Typopp"

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


@dataclass
class AppConfig:
    """Application configuration with secure defaults."""

    # Server settings
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False

    # Request limits
    max_content_length: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_extensions: tuple = ('.txt', '.docx', '.pdf')

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = DEFAULT_RATE_LIMIT_REQUESTS
    rate_limit_window: int = DEFAULT_RATE_LIMIT_WINDOW  # seconds

    # Cross-origin access for the browser client
    cors_origins: str = "*"

    # Google Drive / Docs access
    google_access_token: str = ""
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True
    log_dir: Path = field(default_factory=lambda: Path.cwd() / 'logs')

    def __post_init__(self):
        """Validate and secure configuration."""
        self.log_dir = Path(self.log_dir)
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        # Force debug=False in production environment
        if os.environ.get('TYPOPP_ENV', 'development').lower() == 'production':
            self.debug = False
            self.log_level = "WARNING"

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load configuration from environment variables."""
        return cls(
            host=os.environ.get('TYPOPP_HOST', '127.0.0.1'),
            port=int(os.environ.get('TYPOPP_PORT', '5000')),
            debug=_env_bool('TYPOPP_DEBUG', 'false'),
            max_content_length=int(os.environ.get('TYPOPP_MAX_UPLOAD', str(DEFAULT_MAX_UPLOAD_BYTES))),
            rate_limit_enabled=_env_bool('TYPOPP_RATE_LIMIT', 'true'),
            rate_limit_requests=int(os.environ.get('TYPOPP_RATE_LIMIT_REQUESTS', str(DEFAULT_RATE_LIMIT_REQUESTS))),
            rate_limit_window=int(os.environ.get('TYPOPP_RATE_LIMIT_WINDOW', str(DEFAULT_RATE_LIMIT_WINDOW))),
            cors_origins=os.environ.get('TYPOPP_CORS_ORIGINS', '*'),
            google_access_token=os.environ.get('TYPOPP_GOOGLE_ACCESS_TOKEN', ''),
            http_timeout=float(os.environ.get('TYPOPP_HTTP_TIMEOUT', str(DEFAULT_HTTP_TIMEOUT))),
            log_level=os.environ.get('TYPOPP_LOG_LEVEL', 'INFO'),
            log_format=os.environ.get('TYPOPP_LOG_FORMAT', 'json'),
            log_to_file=_env_bool('TYPOPP_LOG_TO_FILE', 'false'),
            log_dir=Path(os.environ.get('TYPOPP_LOG_DIR', str(Path.cwd() / 'logs'))),
        )

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if self.debug and os.environ.get('TYPOPP_ENV') == 'production':
            errors.append("Debug mode cannot be enabled in production")

        if self.max_content_length > MAX_SAFE_UPLOAD_BYTES:
            errors.append(f"Max content length exceeds safe limit ({MAX_SAFE_UPLOAD_MB}MB)")

        if self.rate_limit_enabled and (self.rate_limit_requests <= 0 or self.rate_limit_window <= 0):
            errors.append("Rate limit requests and window must be positive")

        if self.http_timeout <= 0:
            errors.append("HTTP timeout must be positive")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured JSON logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[AppConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(getattr(logging, self.config.log_level.upper(), logging.INFO))
        self.logger.handlers.clear()

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        # Rotating file handler keeps the log directory bounded
        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        return getattr(cls._local, 'correlation_id', None) or str(uuid.uuid4())[:8]

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _build_log_record(self, level: str, message: str, **kwargs) -> Dict[str, Any]:
        """Build a structured log record."""
        return {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': level,
            'logger': self.name,
            'correlation_id': self.get_correlation_id(),
            'message': message,
            **kwargs
        }

    def _render(self, level: str, message: str, **kwargs) -> str:
        if self.config.log_format != 'json':
            return message
        return json.dumps(self._build_log_record(level, message, **kwargs), default=str)

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self.logger.debug(self._render('DEBUG', message, **kwargs))

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(self._render('INFO', message, **kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(self._render('WARNING', message, **kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        if exc_info and self.config.log_format == 'json':
            import traceback
            kwargs['traceback'] = traceback.format_exc()
        self.logger.error(self._render('ERROR', message, **kwargs), exc_info=exc_info)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message."""
        self.logger.critical(self._render('CRITICAL', message, **kwargs))

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
            duration_ms = (time.time() - start_time) * 1000
            self.info(f"{operation} completed", operation=operation, status='completed',
                      duration_ms=round(duration_ms, 2), **context)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), exc_info=True, **context)
            raise


class JsonFormatter(logging.Formatter):
    """JSON log formatter for records that were not pre-rendered."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.startswith('{'):
            return message
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': message,
        }
        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, get_config())


# =============================================================================
# ERROR HANDLING UTILITIES
# =============================================================================

class TypoppError(Exception):
    """Base exception for Typopp."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(TypoppError):
    """Input validation error."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


class FileError(TypoppError):
    """File handling error."""
    def __init__(self, message: str, filename: Optional[str] = None, **kwargs):
        super().__init__(message, code="FILE_ERROR", status_code=400,
                         details={'filename': filename, **kwargs})


class ProcessingError(TypoppError):
    """Document processing error."""
    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, code="PROCESSING_ERROR", status_code=500,
                         details={'stage': stage, **kwargs})


class AnalysisError(ProcessingError):
    """A checker failed while evaluating its patterns."""
    def __init__(self, message: str, checker: Optional[str] = None, **kwargs):
        super().__init__(message, stage='analysis', checker=checker, **kwargs)
        self.code = "ANALYSIS_ERROR"


class AuthenticationError(TypoppError):
    """Authentication error."""
    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(message, code="AUTH_ERROR", status_code=401, details=kwargs)


class DriveError(TypoppError):
    """Google Drive or Docs request failed."""
    def __init__(self, message: str, upstream_status: Optional[int] = None, **kwargs):
        super().__init__(message, code="DRIVE_ERROR", status_code=502,
                         details={'upstream_status': upstream_status, **kwargs})


class RateLimitError(TypoppError):
    """Rate limit exceeded."""
    def __init__(self, retry_after: int = 60, **kwargs):
        super().__init__("Rate limit exceeded", code="RATE_LIMIT", status_code=429,
                         details={'retry_after': retry_after, **kwargs})


def handle_errors(logger: Optional[StructuredLogger] = None):
    """Decorator for standardized error handling."""
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            try:
                return func(*args, **kwargs)
            except TypoppError:
                raise
            except FileNotFoundError as e:
                _logger.error(f"File not found: {e}", exc_info=True)
                raise FileError(f"File not found: {e}")
            except PermissionError as e:
                _logger.error(f"Permission denied: {e}", exc_info=True)
                raise FileError(f"Permission denied: {e}")
            except ValueError as e:
                _logger.error(f"Validation error: {e}", exc_info=True)
                raise ValidationError(str(e))
            except Exception as e:
                _logger.exception(f"Unexpected error in {func.__name__}: {e}")
                raise ProcessingError(f"An unexpected error occurred: {type(e).__name__}",
                                      stage=func.__name__)
        return wrapper
    return decorator


# =============================================================================
# SECURITY UTILITIES
# =============================================================================

def sanitize_filename(filename: str) -> str:
    """Sanitize a filename to prevent path traversal attacks."""
    filename = filename.replace('/', '').replace('\\', '').replace('\x00', '')
    filename = filename.lstrip('.')
    filename = re.sub(r'[^\w\-_\. ]', '_', filename)
    if len(filename) > 255:
        name, ext = os.path.splitext(filename)
        filename = name[:255-len(ext)] + ext
    return filename or 'unnamed'


def validate_file_extension(filename: str, allowed: tuple = ('.txt', '.docx', '.pdf')) -> bool:
    """Validate file extension."""
    return filename.lower().endswith(allowed)


SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '0',
    'Referrer-Policy': 'no-referrer',
    'Cross-Origin-Resource-Policy': 'same-site',
}


# =============================================================================
# RATE LIMITING
# =============================================================================

class RateLimiter:
    """Simple in-memory sliding-window rate limiter."""

    def __init__(self, max_requests: int = DEFAULT_RATE_LIMIT_REQUESTS,
                 window_seconds: int = DEFAULT_RATE_LIMIT_WINDOW):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, list] = {}
        self._lock = threading.Lock()
        self._last_sweep = time.time()

    def _sweep(self, now: float):
        """Drop keys with no request inside the window. Caller holds the lock."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        stale = [
            key for key, timestamps in self._requests.items()
            if not timestamps or now - max(timestamps) >= self.window_seconds
        ]
        for key in stale:
            del self._requests[key]

    def is_allowed(self, key: str) -> bool:
        """Check if request is allowed."""
        now = time.time()

        with self._lock:
            self._sweep(now)
            recent = [
                t for t in self._requests.get(key, [])
                if now - t < self.window_seconds
            ]
            if len(recent) >= self.max_requests:
                self._requests[key] = recent
                return False

            recent.append(now)
            self._requests[key] = recent
            return True

    def get_retry_after(self, key: str) -> int:
        """Get seconds until rate limit resets."""
        with self._lock:
            timestamps = self._requests.get(key)
            if not timestamps:
                return 0
            oldest = min(timestamps)
        return max(0, int(self.window_seconds - (time.time() - oldest)))

    def reset(self, key: str = None):
        """Reset rate limit for a key or all keys."""
        with self._lock:
            if key:
                self._requests.pop(key, None)
            else:
                self._requests.clear()
