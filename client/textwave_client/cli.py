import argparse
import os
import sys
import json
import subprocess
from typing import Optional

from .api_caller import TextWaveConfig, TextWaveClient, get_default_config_path
from .exceptions import ConfigurationError, TextWaveError
from .logging_config import setup_logging, get_logger
from .models import DEFAULT_BASE_URL, HISTORY_STATUSES

logger = get_logger(__name__)


def write_file(path: str, data: bytes, mode: int = 0o600) -> None:
    with open(path, 'wb') as f:
        f.write(data)
    try:
        os.chmod(path, mode)
    except OSError:
        # chmod is a no-op on non-POSIX
        pass


def _configure_logging(args: argparse.Namespace) -> None:
    setup_logging(log_level="DEBUG" if getattr(args, "verbose", False) else None)


def _client_from_args(args: argparse.Namespace):
    config = TextWaveConfig(args.config)
    return config, TextWaveClient.from_config(config)


def _report_error(e: Exception) -> int:
    if isinstance(e, TextWaveError):
        code = f" [{e.code}]" if e.code else ""
        print(f"Error: HTTP {e.status}{code}: {e.message}", file=sys.stderr)
    else:
        print(f"Error: {e}", file=sys.stderr)
    return 1


def cmd_send_sms(args: argparse.Namespace) -> int:
    """Send an SMS message"""
    try:
        _configure_logging(args)
        config, client = _client_from_args(args)

        recipients = args.to or config.to_number
        if not recipients:
            raise ConfigurationError("No recipient given: pass --to or set to_number in config")
        if isinstance(recipients, list) and len(recipients) == 1:
            recipients = recipients[0]

        response = client.send_sms(recipients, args.message, args.sender_id or config.sender_id)

        if args.verbose:
            print(json.dumps(response, indent=2))
        else:
            data = response.get("data", {})
            print(f"{response.get('message', 'SMS submitted')} "
                  f"(sent: {data.get('totalSent', 0)}, failed: {data.get('totalFailed', 0)}, "
                  f"credits used: {data.get('creditsUsed', 0)})")
        return 0
    except Exception as e:
        return _report_error(e)


def cmd_history(args: argparse.Namespace) -> int:
    """Show message history"""
    try:
        _configure_logging(args)
        _, client = _client_from_args(args)
        response = client.get_history(page=args.page, limit=args.limit, status=args.status)

        if args.verbose:
            print(json.dumps(response, indent=2))
            return 0

        data = response.get("data", {})
        for message in data.get("messages", []):
            print(f"{message.get('createdAt', '')}  {message.get('phone', '')}  "
                  f"{message.get('status', '')}  {message.get('message', '')}")
        pagination = data.get("pagination")
        if pagination:
            print(f"Page {pagination.get('page')} of {pagination.get('totalPages')} "
                  f"({pagination.get('total')} messages)")
        return 0
    except Exception as e:
        return _report_error(e)


def cmd_balance(args: argparse.Namespace) -> int:
    """Show wallet balance"""
    try:
        _configure_logging(args)
        _, client = _client_from_args(args)
        response = client.get_balance()

        if args.verbose:
            print(json.dumps(response, indent=2))
        else:
            data = response.get("data", {})
            print(f"Credits: {data.get('smsCredits')} (total used: {data.get('totalCreditsUsed')})")
        return 0
    except Exception as e:
        return _report_error(e)


def cmd_transactions(args: argparse.Namespace) -> int:
    """Show wallet transactions"""
    try:
        _configure_logging(args)
        _, client = _client_from_args(args)
        response = client.get_transactions(args.page, args.limit)

        if args.verbose:
            print(json.dumps(response, indent=2))
            return 0

        data = response.get("data", {})
        for tx in data.get("transactions", []):
            print(f"{tx.get('createdAt', '')}  {tx.get('type', '')}: {tx.get('smsCredits')} SMS "
                  f"(balance {tx.get('creditsAfter')})  {tx.get('description', '')}")
        return 0
    except Exception as e:
        return _report_error(e)


def cmd_stat(args: argparse.Namespace) -> int:
    """Execute a command and send SMS notification with exit status"""
    try:
        _configure_logging(args)
        config, client = _client_from_args(args)

        command_args = args.command
        if command_args and command_args[0] == "--":
            command_args = command_args[1:]
        command = " ".join(command_args)
        if not command:
            raise ValueError("No command given")

        recipient = args.to or config.to_number
        if not recipient:
            raise ConfigurationError("No recipient given: pass --to or set to_number in config")

        logger.info(f"Executing command: {command}")
        try:
            # shell=True to support pipes, redirects, etc.
            result = subprocess.run(command, shell=True)
            exit_code = result.returncode
        except OSError as e:
            exit_code = 125  # Standard execution error exit code
            logger.error(f"Command execution failed: {e}")
        logger.info(f"Command exit code: {exit_code}")

        if exit_code == 0 and args.message_on in ['success', 'both']:
            message = f"Command '{command}' completed successfully"
        elif exit_code != 0 and args.message_on in ['fail', 'both']:
            message = f"Command '{command}' failed with exit code {exit_code}"
        else:
            return exit_code

        response = client.send_sms(recipient, message, config.sender_id)

        if args.verbose:
            print(json.dumps(response, indent=2))
        else:
            print(f"SMS notification sent: {message}")

        return exit_code
    except Exception as e:
        return _report_error(e)


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize TextWave client - creates config directory and config file"""
    if args.config_dir:
        config_dir = args.config_dir
    else:
        config_dir = os.path.dirname(get_default_config_path())
    config_path = os.path.join(config_dir, "config.json")

    print(f"Initializing TextWave client in: {config_dir}")

    api_key = args.api_key or os.environ.get("TEXTWAVE_API_KEY")
    if not api_key:
        print("An API key is required: pass --api-key or set TEXTWAVE_API_KEY", file=sys.stderr)
        return 1

    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        print(f"Failed to create config directory: {e}", file=sys.stderr)
        return 1

    if os.path.exists(config_path) and not args.force:
        print(f"Config file already exists: {config_path}")
        print("Use --force to overwrite existing files")
        return 1

    config_data = {
        "api_key": api_key,
        "base_url": args.base_url or DEFAULT_BASE_URL,
        "sender_id": args.sender_id,
        "to_number": args.to_number,
        "timeout": args.timeout,
    }
    # Remove None values
    config_data = {k: v for k, v in config_data.items() if v is not None}

    try:
        write_file(config_path, (json.dumps(config_data, indent=2) + "\n").encode("utf-8"), 0o600)
    except OSError as e:
        print(f"Failed to create config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config file: {config_path}")
    print("\nTextWave client initialized successfully!")
    return 0


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=None, help="Config file path (default: $TEXTWAVE_CONFIG or the config directory)")
    p.add_argument("--verbose", "-v", action="store_true", help="Print raw JSON and debug logging (default: False)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="textwave", description="TextWave Bulk SMS client utilities")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Create a config file", description="Create the configuration directory and a config file holding the API key and sending defaults.")
    p_init.add_argument("--config-dir", help="Config directory (default: XDG_CONFIG_HOME/textwave or ~/.config/textwave)")
    p_init.add_argument("--api-key", help="TextWave API key (default: $TEXTWAVE_API_KEY)")
    p_init.add_argument("--base-url", help=f"API base URL (default: {DEFAULT_BASE_URL})")
    p_init.add_argument("--sender-id", help="Default sender ID")
    p_init.add_argument("--to-number", help="Default recipient phone number")
    p_init.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: none)")
    p_init.add_argument("--force", action="store_true", help="Overwrite existing files")
    p_init.set_defaults(func=cmd_init)

    p_send = sub.add_parser("send", help="Send an SMS message", description="Send an SMS message to one or more phone numbers.")
    p_send.add_argument("message", help="Message to send")
    p_send.add_argument("--to", action="append", help="Recipient phone number; repeat for a bulk send (default: to_number from config)")
    p_send.add_argument("--sender-id", help="Sender ID (default: sender_id from config)")
    _add_common_args(p_send)
    p_send.set_defaults(func=cmd_send_sms)

    p_hist = sub.add_parser("history", help="Show message history", description="List sent messages, optionally filtered by status.")
    p_hist.add_argument("--page", type=int, default=None, help="Page number")
    p_hist.add_argument("--limit", type=int, default=None, help="Items per page")
    p_hist.add_argument("--status", choices=HISTORY_STATUSES, default=None, help="Only messages with this status")
    _add_common_args(p_hist)
    p_hist.set_defaults(func=cmd_history)

    p_bal = sub.add_parser("balance", help="Show wallet balance", description="Show the SMS credit balance and total credits used.")
    _add_common_args(p_bal)
    p_bal.set_defaults(func=cmd_balance)

    p_tx = sub.add_parser("transactions", help="Show wallet transactions", description="List wallet credit and debit transactions.")
    p_tx.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    p_tx.add_argument("--limit", type=int, default=20, help="Items per page (default: 20)")
    _add_common_args(p_tx)
    p_tx.set_defaults(func=cmd_transactions)

    p_stat = sub.add_parser("stat", help="Execute command and send SMS notification with exit status",
                            description="Execute a command and send an SMS notification indicating whether"
                            " the command completed successfully or failed with its exit code.")
    p_stat.add_argument("--to", help="Recipient phone number (default: to_number from config)")
    p_stat.add_argument("--message-on", choices=["success", "fail", "both"], default="both", help="Send message on 'success', 'fail', or 'both' (default: both)")
    _add_common_args(p_stat)
    p_stat.add_argument("command", nargs=argparse.REMAINDER, help="Command to execute")
    p_stat.set_defaults(func=cmd_stat)

    return p


def main(argv: Optional[list] = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
