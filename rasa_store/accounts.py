from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel

from .errors import NotFoundError, ValidationError
from .local_store import LocalStore
from .models import OTPRecord, OTPVerification, Record, new_id
from .remote import CallResult
from .resources import ResourceAPI

logger = logging.getLogger(__name__)

MEMBERS = "members"


class RegistrationForm(BaseModel):
    full_name: str
    email: str
    password: str
    confirm_password: str
    phone: str = ""
    program: str = ""
    level: str = ""
    diocese: str = ""
    department: str = ""
    profile_image: str = ""


class AccountService:
    """
    Member sign-in, registration and OTP-based password recovery.

    Credential checks run against the local store. Input problems raise
    ``ValidationError`` before anything is written; OTP failures come back as
    an ``OTPVerification`` rather than an exception.
    """

    def __init__(self, store: LocalStore, api: ResourceAPI, *, debug_log_otps: bool = False):
        self._store = store
        self._api = api
        self._debug_log_otps = debug_log_otps

    def login(self, email: str, password: str) -> Record | None:
        member = self._store.verify_credential(email, password)
        if member is None:
            logger.info("LOGIN: rejected credentials for %s", email.strip().lower())
        return member

    def register(self, form: RegistrationForm) -> CallResult[Record]:
        email = form.email.strip().lower()
        if not email:
            raise ValidationError("Email is required")
        if not form.password:
            raise ValidationError("Password is required")
        if form.password != form.confirm_password:
            raise ValidationError("Passwords do not match")
        if self._store.find_by_email(MEMBERS, email) is not None:
            raise ValidationError(f"{email} is already registered")

        record: Record = {
            "id": f"u-{new_id()}",
            "fullName": form.full_name.strip(),
            "email": email,
            "password": form.password,
            "phone": form.phone,
            "role": "member",
            "program": form.program,
            "level": form.level,
            "diocese": form.diocese,
            "department": form.department,
            "profileImage": form.profile_image,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        result = self._api.members.create(record)
        member = {k: v for k, v in record.items() if k != "password"}
        return CallResult(data=member, source=result.source, error=result.error)

    def request_password_reset(self, email: str) -> OTPRecord:
        """
        Issue a fresh one-time code for ``email``; any earlier code stops working.

        Delivering the code to the member is the caller's job.
        """
        if self._store.find_by_email(MEMBERS, email) is None:
            raise NotFoundError(MEMBERS, email)
        otp = self._store.generate_otp(email)
        if self._debug_log_otps:
            logger.info("OTP ISSUED: %s code=%s", otp.email, otp.code)
        else:
            logger.info("OTP ISSUED: %s", otp.email)
        return otp

    def reset_password(self, email: str, code: str, new_password: str, confirm_password: str) -> OTPVerification:
        if not new_password:
            raise ValidationError("Password is required")
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")

        with self._store.lock:
            if self._store.find_by_email(MEMBERS, email) is None:
                raise NotFoundError(MEMBERS, email)
            verification = self._store.verify_otp(email, code)
            if not verification:
                return verification
            if not self._store.update_by_email(MEMBERS, email, {"password": new_password}):
                raise NotFoundError(MEMBERS, email)
        logger.info("PASSWORD RESET: completed for %s", email.strip().lower())
        return verification
