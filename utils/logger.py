"""
Persistent logging to the system/api/error log tables
"""
from sqlalchemy.orm import Session
from models.log import SystemLog, ApiLog, ErrorLog, LogLevel, LogCategory
import database
from utils.sanitizer import DataSanitizer
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

class DatabaseLogger:
    """Centralized database logger. Writes are best-effort and never raise."""
    
    @staticmethod
    def _open_session(db: Optional[Session]):
        if db is not None:
            return db, False
        if database.SessionLocal is None:
            return None, False
        return database.SessionLocal(), True
    
    @staticmethod
    def _write(record, db: Optional[Session], kind: str) -> bool:
        session, should_close = DatabaseLogger._open_session(db)
        if session is None:
            return False
        
        try:
            session.add(record)
            session.commit()
            return True
        except Exception as e:
            logger.warning(f"Failed to write {kind} log: {e}")
            session.rollback()
            return False
        finally:
            if should_close:
                session.close()
    
    @staticmethod
    def log_system(
        level: LogLevel,
        category: LogCategory,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        db: Optional[Session] = None
    ) -> bool:
        """Log system events with customer contact details masked"""
        log = SystemLog(
            level=level,
            category=category,
            message=DataSanitizer.sanitize_string(message),
            details=DataSanitizer.to_json(details),
            entity_type=entity_type,
            entity_id=entity_id
        )
        return DatabaseLogger._write(log, db, "system")
    
    @staticmethod
    def log_api_request(
        method: str,
        endpoint: str,
        status_code: int,
        request_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        duration_ms: Optional[int] = None,
        db: Optional[Session] = None
    ) -> bool:
        """Log one handled API request"""
        log = ApiLog(
            request_id=request_id,
            method=method,
            endpoint=endpoint,
            status_code=status_code,
            ip_address=ip_address,
            duration_ms=duration_ms
        )
        return DatabaseLogger._write(log, db, "API")
    
    @staticmethod
    def log_error(
        error_type: str,
        error_message: str,
        stack_trace: Optional[str] = None,
        endpoint: Optional[str] = None,
        request_data: Optional[Dict[str, Any]] = None,
        severity: LogLevel = LogLevel.ERROR,
        db: Optional[Session] = None
    ) -> bool:
        """Log errors and exceptions with customer contact details masked"""
        log = ErrorLog(
            error_type=error_type,
            error_message=DataSanitizer.sanitize_string(error_message),
            stack_trace=stack_trace,
            endpoint=endpoint,
            request_data=DataSanitizer.to_json(request_data),
            severity=severity,
            resolved="false"
        )
        return DatabaseLogger._write(log, db, "error")

# Convenience functions
def log_info(message: str, category: LogCategory = LogCategory.SYSTEM, **kwargs):
    """Log INFO level message"""
    return DatabaseLogger.log_system(LogLevel.INFO, category, message, **kwargs)

def log_warning(message: str, category: LogCategory = LogCategory.SYSTEM, **kwargs):
    """Log WARNING level message"""
    return DatabaseLogger.log_system(LogLevel.WARNING, category, message, **kwargs)
