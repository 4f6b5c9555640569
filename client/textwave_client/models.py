"""
TextWave API records

Typed shapes of the request and response bodies exchanged with the TextWave
Bulk SMS API. These are ``TypedDict``s: the client hands back the parsed JSON
body as-is, so nothing here validates or converts server payloads.
"""

from typing import List, Literal, Optional, Tuple, TypedDict, Union, get_args


DEFAULT_BASE_URL = "https://api.textwave.co.ke/v1"

# Limits documented by the API. The server enforces them, the client does not.
MAX_MESSAGE_LENGTH = 1600
MAX_SENDER_ID_LENGTH = 11

MessageStatus = Literal["pending", "sent", "delivered", "failed"]
HISTORY_STATUSES: Tuple[str, ...] = get_args(MessageStatus)

Recipients = Union[str, List[str]]


class _SendSmsRequestBase(TypedDict):
    to: Recipients
    message: str


class SendSmsRequest(_SendSmsRequestBase, total=False):
    senderId: str


class _SendSmsResultBase(TypedDict):
    phone: str
    status: Literal["sent", "failed", "queued"]


class SendSmsResult(_SendSmsResultBase, total=False):
    messageId: str
    error: str


class SendSmsData(TypedDict):
    totalSent: int
    totalFailed: int
    creditsUsed: int
    results: List[SendSmsResult]


class SendSmsResponse(TypedDict):
    status: Literal["complete", "partial", "failed"]
    message: str
    data: SendSmsData


class _MessageBase(TypedDict):
    id: str
    phone: str
    message: str
    status: MessageStatus
    senderId: str
    channel: Literal["web", "api"]
    smsCount: int
    cost: float
    createdAt: str


class Message(_MessageBase, total=False):
    sentAt: str
    deliveredAt: str


class Pagination(TypedDict):
    page: int
    limit: int
    total: int
    totalPages: int


class HistoryData(TypedDict):
    messages: List[Message]
    pagination: Pagination


class HistoryResponse(TypedDict):
    status: Literal["success"]
    data: HistoryData


class WalletBalance(TypedDict):
    smsCredits: int
    totalCreditsUsed: int


class BalanceResponse(TypedDict):
    status: Literal["success"]
    data: WalletBalance


class Transaction(TypedDict):
    id: str
    type: Literal["credit", "debit"]
    smsCredits: int
    creditsAfter: int
    description: str
    createdAt: str


class TransactionsData(TypedDict):
    transactions: List[Transaction]
    pagination: Pagination


class TransactionsResponse(TypedDict):
    status: Literal["success"]
    data: TransactionsData


def is_single_recipient(to: Optional[Recipients]) -> bool:
    """True when ``to`` is one phone number rather than a sequence of them"""
    return isinstance(to, str)
