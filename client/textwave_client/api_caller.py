"""
TextWave API Client Module

This module sends SMS messages and reads message history, wallet balance and
wallet transactions through the TextWave Bulk SMS API using API key
authentication.
"""

import os
import json
import logging
from typing import Dict, Optional, Sequence, Union
from urllib.parse import urlencode

import requests

from .exceptions import ConfigurationError, TextWaveError
from .logging_config import log_api_event
from .models import (
    DEFAULT_BASE_URL,
    BalanceResponse,
    HistoryResponse,
    MessageStatus,
    SendSmsRequest,
    SendSmsResponse,
    TransactionsResponse,
    is_single_recipient,
)

logger = logging.getLogger(__name__)

API_KEY_HELP = "API key is required. Get one at https://textwave.co.ke"


def get_default_config_path() -> str:
    """Get the default config file path following XDG standards"""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return os.path.join(xdg_config_home, "textwave", "config.json")

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, ".config", "textwave", "config.json")

    return os.path.join(os.getcwd(), ".config", "textwave", "config.json")


class TextWaveConfig:
    """Configuration for the TextWave client"""

    def __init__(self, config_path: Optional[str] = None):
        if config_path is None:
            config_path = os.environ.get("TEXTWAVE_CONFIG") or get_default_config_path()

        self.config_path = config_path
        self.api_key: str = ""
        self.base_url: str = DEFAULT_BASE_URL
        self.sender_id: Optional[str] = None
        self.to_number: Optional[str] = None
        self.timeout: Optional[float] = None

        self._load_config()

    def _load_config(self):
        """Load configuration from file, then apply environment overrides"""
        env_api_key = os.environ.get("TEXTWAVE_API_KEY")

        if os.path.exists(self.config_path):
            with open(self.config_path, 'r') as f:
                try:
                    config_data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigurationError(f"Invalid config file {self.config_path}: {e}") from e
            if not isinstance(config_data, dict):
                raise ConfigurationError(f"Invalid config file {self.config_path}: expected a JSON object")
        elif env_api_key:
            config_data = {}
        else:
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        self.api_key = env_api_key or config_data.get('api_key') or ""
        if not self.api_key:
            raise ConfigurationError(f"Missing required config field: api_key ({self.config_path})")

        self.base_url = os.environ.get("TEXTWAVE_BASE_URL") or config_data.get('base_url') or DEFAULT_BASE_URL

        # Optional fields
        self.sender_id = config_data.get('sender_id')
        self.to_number = config_data.get('to_number')

        timeout = config_data.get('timeout')
        if timeout is not None:
            try:
                self.timeout = float(timeout)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid timeout in config: {timeout!r}") from e


class TextWaveClient:
    """Client for the TextWave Bulk SMS API"""

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL, timeout: Optional[float] = None):
        """
        Create a new TextWave client

        Args:
            api_key: TextWave API key (dashboard -> Settings -> API Keys)
            base_url: API base URL (default: https://api.textwave.co.ke/v1)
            timeout: Seconds to wait for the server; None waits indefinitely

        Raises:
            ConfigurationError: If the API key is empty
        """
        if not api_key:
            raise ConfigurationError(API_KEY_HELP)
        self._api_key = api_key
        self._base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: TextWaveConfig) -> "TextWaveClient":
        """Create a client from a loaded TextWaveConfig"""
        return cls(config.api_key, config.base_url, timeout=config.timeout)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def base_url(self) -> str:
        return self._base_url

    def __repr__(self):
        # Never expose the key
        return f"TextWaveClient(base_url={self._base_url!r})"

    def _request(self, method: str, endpoint: str, headers: Optional[Dict[str, str]] = None,
                 body: Optional[Dict] = None):
        """
        Make an authenticated request to the TextWave API

        The body is always decoded as JSON. Any non-2xx status raises
        TextWaveError; transport and decode errors from requests propagate.
        """
        url = f"{self._base_url}{endpoint}"

        request_headers = {
            "Authorization": f"ApiKey {self._api_key}",
            "Content-Type": "application/json",
        }
        if headers:
            request_headers.update(headers)

        data = json.dumps(body) if body is not None else None

        logger.debug(f"{method} {url}")
        response = requests.request(
            method,
            url,
            headers=request_headers,
            data=data,
            timeout=self.timeout,
        )

        result = response.json()

        if not 200 <= response.status_code < 300:
            error = TextWaveError.from_response(response.status_code, result)
            log_api_event("api_error", method, endpoint, status=error.status, code=error.code, success=False)
            raise error

        log_api_event("api_response", method, endpoint, status=response.status_code)
        return result

    def send_sms(self, to: Union[str, Sequence[str]], message: str,
                 sender_id: Optional[str] = None) -> SendSmsResponse:
        """
        Send SMS to one or more phone numbers

        Args:
            to: Phone number, or ordered sequence of numbers, in international
                format (e.g. '254712345678')
            message: SMS message content (the API allows up to 1600 chars)
            sender_id: Optional custom sender ID (the API allows up to 11 chars)

        Returns:
            SendSmsResponse: Per-recipient results and credits used
        """
        body: SendSmsRequest = {
            "to": to if is_single_recipient(to) else list(to),
            "message": message,
        }
        if sender_id:
            body["senderId"] = sender_id

        return self._request("POST", "/sms/send", body=body)

    def get_history(self, page: Optional[int] = None, limit: Optional[int] = None,
                    status: Optional[MessageStatus] = None) -> HistoryResponse:
        """
        Get message history

        Args:
            page: Page number
            limit: Items per page
            status: Only messages in this state ('pending', 'sent',
                'delivered' or 'failed')

        Returns:
            HistoryResponse: Paginated message history
        """
        params = {}
        if page:
            params["page"] = page
        if limit:
            params["limit"] = limit
        if status:
            params["status"] = status

        query = f"?{urlencode(params)}" if params else ""
        return self._request("GET", f"/sms/history{query}")

    def get_balance(self) -> BalanceResponse:
        """Get wallet balance and SMS credits"""
        return self._request("GET", "/wallet/balance")

    def get_transactions(self, page: int = 1, limit: int = 20) -> TransactionsResponse:
        """
        Get wallet transaction history

        Args:
            page: Page number (default: 1)
            limit: Items per page (default: 20)

        Returns:
            TransactionsResponse: Paginated credit and debit transactions
        """
        return self._request("GET", f"/wallet/transactions?page={page}&limit={limit}")


def load_config(config_path: Optional[str] = None) -> TextWaveConfig:
    """
    Reads a config to get the API key, base URL and sending defaults

    Args:
        config_path: Path to the configuration file

    Returns:
        TextWaveConfig: Configuration object
    """
    return TextWaveConfig(config_path)


def send_sms(api_config: TextWaveConfig, message: str,
             to: Optional[Union[str, Sequence[str]]] = None,
             sender_id: Optional[str] = None) -> SendSmsResponse:
    """
    Send an SMS message using a loaded configuration

    Args:
        api_config: TextWave configuration
        message: The message to send
        to: Recipient(s); defaults to the configured to_number
        sender_id: Sender ID; defaults to the configured sender_id

    Returns:
        SendSmsResponse: Response from the server
    """
    recipients = to or api_config.to_number
    if not recipients:
        raise ConfigurationError("No recipient given and no to_number in config")

    client = TextWaveClient.from_config(api_config)
    return client.send_sms(recipients, message, sender_id or api_config.sender_id)


def get_balance(api_config: TextWaveConfig) -> BalanceResponse:
    """
    Get the wallet balance using a loaded configuration

    Args:
        api_config: TextWave configuration

    Returns:
        BalanceResponse: Response from the server
    """
    client = TextWaveClient.from_config(api_config)
    return client.get_balance()
