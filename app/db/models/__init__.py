"""
Database models module.

Importing this package registers every model on Base.metadata before table creation.
"""
from app.db.models.user import User, UserRole
from app.db.models.job import Job
from app.db.models.application import Application, ApplicationStatus
from app.db.models.credit_purchase import CreditPurchase

__all__ = [
    "User",
    "UserRole",
    "Job",
    "Application",
    "ApplicationStatus",
    "CreditPurchase",
]
