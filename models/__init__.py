from models.product import Product, ProductItem, PartialPayment, PaymentStatus, WorkStatus
from models.transaction import Transaction, TransactionType, TransactionStatus
from models.ledger import LedgerEntry, LedgerType
from models.remaining import RemainingBalance
from models.log import SystemLog, ApiLog, ErrorLog, LogLevel, LogCategory

__all__ = ["Product", "ProductItem", "PartialPayment", "PaymentStatus", "WorkStatus", "Transaction", "TransactionType", "TransactionStatus", "LedgerEntry", "LedgerType", "RemainingBalance", "SystemLog", "ApiLog", "ErrorLog", "LogLevel", "LogCategory"]
