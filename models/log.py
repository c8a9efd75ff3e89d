from sqlalchemy import Column, Integer, String, DateTime, Text, Enum as SQLEnum
from datetime import datetime
from database import Base
import enum

class LogLevel(str, enum.Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

class LogCategory(str, enum.Enum):
    API_REQUEST = "api_request"
    DATABASE = "database"
    ORDER_MANAGEMENT = "order_management"
    TRANSACTION_SYNC = "transaction_sync"
    LEDGER = "ledger"
    SYSTEM = "system"

class SystemLog(Base):
    """General system logs for all application events"""
    __tablename__ = "system_logs"
    
    id = Column(Integer, primary_key=True, index=True)
    level = Column(SQLEnum(LogLevel), nullable=False, index=True)
    category = Column(SQLEnum(LogCategory), nullable=False, index=True)
    message = Column(Text, nullable=False)
    details = Column(Text, nullable=True)  # JSON string for additional data
    entity_type = Column(String(100), nullable=True)  # product, transaction, ledger
    entity_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

class ApiLog(Base):
    """API request/response logs"""
    __tablename__ = "api_logs"
    
    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(String(64), nullable=True, index=True)
    method = Column(String(10), nullable=False)
    endpoint = Column(String(500), nullable=False, index=True)
    status_code = Column(Integer, nullable=False, index=True)
    ip_address = Column(String(50), nullable=True)
    duration_ms = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

class ErrorLog(Base):
    """Error and exception logs"""
    __tablename__ = "error_logs"
    
    id = Column(Integer, primary_key=True, index=True)
    error_type = Column(String(200), nullable=False, index=True)
    error_message = Column(Text, nullable=False)
    stack_trace = Column(Text, nullable=True)
    endpoint = Column(String(500), nullable=True)
    request_data = Column(Text, nullable=True)
    severity = Column(SQLEnum(LogLevel), default=LogLevel.ERROR, nullable=False)
    resolved = Column(String(10), default="false", nullable=False)  # "true" or "false"
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
