"""
Data sanitization utilities for logging customer information
"""
import re
import json
from typing import Optional, Dict, Any

class DataSanitizer:
    """Mask customer contact details before they reach the log tables"""
    
    # Field names whose values are masked
    SENSITIVE_FIELDS = {'phone', 'mobile', 'contact', 'password', 'token', 'secret'}
    
    # Runs of 7+ digits (optionally with +, spaces or dashes) are treated as phone numbers
    PHONE_PATTERN = re.compile(r'\+?\d[\d\s\-]{5,}\d')
    
    MAX_BODY_SIZE = 10000  # Max characters for logged text
    
    @staticmethod
    def mask_phone(value: str) -> str:
        """Keep the last three digits: 0791234567 -> *******567"""
        digits = re.sub(r'\D', '', value)
        if len(digits) <= 3:
            return '*' * len(digits)
        return '*' * (len(digits) - 3) + digits[-3:]
    
    @staticmethod
    def sanitize_dict(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively sanitize dictionary data"""
        if not isinstance(data, dict):
            return data
        
        sanitized = {}
        for key, value in data.items():
            if any(sensitive in key.lower() for sensitive in DataSanitizer.SENSITIVE_FIELDS):
                sanitized[key] = DataSanitizer.mask_phone(str(value)) if value else value
            elif isinstance(value, dict):
                sanitized[key] = DataSanitizer.sanitize_dict(value)
            elif isinstance(value, list):
                sanitized[key] = [
                    DataSanitizer.sanitize_dict(item) if isinstance(item, dict) else item
                    for item in value
                ]
            elif isinstance(value, str):
                sanitized[key] = DataSanitizer.sanitize_string(value)
            else:
                sanitized[key] = value
        
        return sanitized
    
    @staticmethod
    def sanitize_string(text: Optional[str]) -> Optional[str]:
        """Mask phone numbers inside free text and cap its length"""
        if not text:
            return text
        
        if len(text) > DataSanitizer.MAX_BODY_SIZE:
            text = text[:DataSanitizer.MAX_BODY_SIZE] + "...[TRUNCATED]"
        
        return DataSanitizer.PHONE_PATTERN.sub(lambda m: DataSanitizer.mask_phone(m.group(0)), text)
    
    @staticmethod
    def to_json(data: Optional[Dict[str, Any]]) -> Optional[str]:
        """Sanitize a dict and serialize it for a Text column"""
        if not data:
            return None
        result = json.dumps(DataSanitizer.sanitize_dict(data), default=str)
        if len(result) > DataSanitizer.MAX_BODY_SIZE:
            result = result[:DataSanitizer.MAX_BODY_SIZE] + "...[TRUNCATED]"
        return result
