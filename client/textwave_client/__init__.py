"""
TextWave Client

A Python client library for the TextWave Bulk SMS API with API key authentication.
"""

from .api_caller import TextWaveConfig, TextWaveClient, send_sms, get_balance, load_config
from .exceptions import ConfigurationError, TextWaveError
from .models import DEFAULT_BASE_URL, MAX_MESSAGE_LENGTH, MAX_SENDER_ID_LENGTH

__all__ = [
    'TextWaveConfig',
    'TextWaveClient',
    'TextWaveError',
    'ConfigurationError',
    'DEFAULT_BASE_URL',
    'MAX_MESSAGE_LENGTH',
    'MAX_SENDER_ID_LENGTH',
    'send_sms',
    'get_balance',
    'load_config',
]

__version__ = "0.1.0"
