"""
Services module - Business logic layer for the DMS booking desk.
"""
from services.auth_service import AuthService
from services.booking_service import BookingService
from services.lifecycle_service import LifecycleService
from services.completed_file_service import CompletedFileService
from services.master_data_service import MasterDataService

__all__ = [
    "AuthService",
    "BookingService",
    "LifecycleService",
    "CompletedFileService",
    "MasterDataService",
]
