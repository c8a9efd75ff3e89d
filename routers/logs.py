"""
Log viewing endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Optional
from datetime import datetime
from database import get_db
from models.log import SystemLog, ApiLog, ErrorLog
from routers.common import ApiModel

router = APIRouter(prefix="/api/logs", tags=["Logs"])

class LogResponse(ApiModel):
    id: int
    log_type: str
    level: Optional[str] = None
    severity: Optional[str] = None
    category: Optional[str] = None
    message: Optional[str] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    endpoint: Optional[str] = None
    method: Optional[str] = None
    status_code: Optional[int] = None
    duration_ms: Optional[int] = None
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    created_at: datetime

def _error_row(log: ErrorLog) -> dict:
    return {
        "id": log.id,
        "log_type": "error",
        "severity": log.severity.value,
        "error_type": log.error_type,
        "error_message": log.error_message,
        "endpoint": log.endpoint,
        "created_at": log.created_at
    }

@router.get("/all", response_model=List[LogResponse])
def get_all_logs(limit: int = Query(200, ge=1, le=1000), db: Session = Depends(get_db)):
    """System, API and error logs combined, newest first"""
    all_logs = []
    
    for log in db.query(SystemLog).order_by(desc(SystemLog.created_at)).limit(limit).all():
        all_logs.append({
            "id": log.id,
            "log_type": "system",
            "level": log.level.value,
            "category": log.category.value,
            "message": log.message,
            "entity_type": log.entity_type,
            "entity_id": log.entity_id,
            "created_at": log.created_at
        })
    
    for log in db.query(ApiLog).order_by(desc(ApiLog.created_at)).limit(limit).all():
        all_logs.append({
            "id": log.id,
            "log_type": "api",
            "endpoint": log.endpoint,
            "method": log.method,
            "status_code": log.status_code,
            "duration_ms": log.duration_ms,
            "created_at": log.created_at
        })
    
    for log in db.query(ErrorLog).order_by(desc(ErrorLog.created_at)).limit(limit).all():
        all_logs.append(_error_row(log))
    
    all_logs.sort(key=lambda x: x["created_at"], reverse=True)
    return [LogResponse(**row) for row in all_logs[:limit]]

@router.get("/errors", response_model=List[LogResponse])
def get_error_logs(
    error_type: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """Error logs, e.g. error_type=TransactionSyncError for failed mirror writes"""
    query = db.query(ErrorLog)
    if error_type:
        query = query.filter(ErrorLog.error_type == error_type)
    return [LogResponse(**_error_row(log)) for log in query.order_by(desc(ErrorLog.created_at)).limit(limit).all()]
