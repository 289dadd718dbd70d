"""
Booking Audit - Configuration Management
Settings come from the environment (python-dotenv loads .env locally) or,
when ENVIRONMENT=production, from AWS SSM Parameter Store under
AWS_SSM_PREFIX (default /booking-audit).

Every audit threshold has a default, so a bare environment runs the audit
with the standard rules.
"""

import logging
import os
from typing import Callable, Dict, Optional, TypeVar
from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()

T = TypeVar('T')

_TRUE_VALUES = ('true', '1', 'yes', 'on')


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded."""
    pass


class Config:
    """
    Configuration lookup for the audit service.

    Local mode reads os.environ. Production mode reads SSM, caching each
    parameter for the life of the process.
    """

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'local')
        self._ssm_client = None
        self._ssm_cache: Dict[str, str] = {}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Args:
            key: Setting name, e.g. 'AUDIT_MAX_GUESTS'
            default: Returned when the setting is not defined

        Returns:
            Raw string value or default
        """
        if self.is_production:
            return self._get_from_ssm(key, default)
        return os.getenv(key, default)

    def _ssm(self):
        if self._ssm_client is None:
            import boto3
            self._ssm_client = boto3.client('ssm', region_name=os.getenv('AWS_REGION', 'us-east-1'))
        return self._ssm_client

    def _get_from_ssm(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Raises:
            ConfigurationError: If the parameter cannot be read and there is no default
        """
        if key in self._ssm_cache:
            return self._ssm_cache[key]

        parameter_name = f"{os.getenv('AWS_SSM_PREFIX', '/booking-audit')}/{key}"
        try:
            response = self._ssm().get_parameter(Name=parameter_name, WithDecryption=True)
        except Exception as e:
            error_type = type(e).__name__
            # botocore generates ParameterNotFound per client, so match it by name
            if error_type == 'ParameterNotFound':
                if default is not None:
                    return default
                raise ConfigurationError(
                    f"Required parameter '{key}' not found in SSM at path '{parameter_name}'"
                ) from e
            if default is not None:
                logging.warning(f"SSM lookup for '{key}' failed ({error_type}: {e}); using default")
                return default
            raise ConfigurationError(
                f"Failed to fetch parameter '{key}' from SSM: {error_type}: {e}"
            ) from e

        value = response['Parameter']['Value']
        self._ssm_cache[key] = value
        return value

    def _get_converted(self, key: str, default: T, convert: Callable[[str], T]) -> T:
        value = self.get(key, str(default))
        if value is None:
            return default
        try:
            return convert(value)
        except (ValueError, TypeError):
            logging.warning(f"Invalid value for config key '{key}': '{value}'; using default={default}")
            return default

    def get_int(self, key: str, default: int) -> int:
        return self._get_converted(key, default, int)

    def get_float(self, key: str, default: float) -> float:
        return self._get_converted(key, default, float)

    def get_bool(self, key: str, default: bool) -> bool:
        return self._get_converted(key, default, lambda value: value.strip().lower() in _TRUE_VALUES)

    @property
    def is_production(self) -> bool:
        return self.environment == 'production'


# Global configuration instance
config = Config()


# Database configuration
DB_HOST = config.get('DB_HOST', 'localhost')
DB_PORT = config.get_int('DB_PORT', 3306)
DB_NAME = config.get('DB_NAME', 'bookings_dev')
DB_USER = config.get('DB_USER', 'root')
DB_PASSWORD = config.get('DB_PASSWORD', '')

# Flask configuration
FLASK_ENV = config.get('FLASK_ENV', 'development')
FLASK_DEBUG = config.get_bool('FLASK_DEBUG', True)
SECRET_KEY = config.get('SECRET_KEY', 'dev-secret-key-change-in-production')

# Logging configuration
LOG_LEVEL = config.get('LOG_LEVEL', 'INFO')

# Store connectivity probe retries
MAX_RETRY_ATTEMPTS = config.get_int('MAX_RETRY_ATTEMPTS', 3)
RETRY_BACKOFF_MULTIPLIER = config.get_int('RETRY_BACKOFF_MULTIPLIER', 1)

# Audit thresholds (defaults match the long-standing hard-coded values)
AUDIT_PAST_HORIZON_YEARS = config.get_int('AUDIT_PAST_HORIZON_YEARS', 2)
AUDIT_FUTURE_HORIZON_YEARS = config.get_int('AUDIT_FUTURE_HORIZON_YEARS', 5)
AUDIT_PRICE_CEILING = config.get_float('AUDIT_PRICE_CEILING', 100000.0)  # ₹1,00,000
AUDIT_OUTLIER_MULTIPLIER = config.get_float('AUDIT_OUTLIER_MULTIPLIER', 5.0)
AUDIT_STALE_PENDING_DAYS = config.get_int('AUDIT_STALE_PENDING_DAYS', 3)
AUDIT_MAX_GUESTS = config.get_int('AUDIT_MAX_GUESTS', 50)
AUDIT_MIN_STAY_DAYS = config.get_float('AUDIT_MIN_STAY_DAYS', 1.0)
AUDIT_ADVANCE_BOOKING_YEARS = config.get_int('AUDIT_ADVANCE_BOOKING_YEARS', 2)
AUDIT_BULK_CLEANUP_THRESHOLD = config.get_int('AUDIT_BULK_CLEANUP_THRESHOLD', 50)

# Upper bound on concurrently executing rule modules
AUDIT_MAX_WORKERS = config.get_int('AUDIT_MAX_WORKERS', 4)

# Database connection pool settings
DB_POOL_SIZE = 10
DB_POOL_MAX_OVERFLOW = 20
DB_POOL_RECYCLE = 3600  # Recycle connections after 1 hour
DB_POOL_PRE_PING = True  # Health check connections before use
