# ========================================
# placement_portal/routes/auth.py
# ========================================

import logging
import os
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import DuplicateKeyError

from placement_portal.database import get_db
from placement_portal.models.base import to_object_id
from placement_portal.schemas.auth import (
    SignInRequest,
    TokenResponse,
    CompanySignUp,
    StudentSignUp,
    VerifyEmailRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ChangePasswordRequest
)
from placement_portal.services.ports import Notifier
from placement_portal.utils.auth import ROLE_COLLECTIONS, create_access_token, get_current_user
from placement_portal.utils.email import get_notifier, send_template_email
from placement_portal.utils.security import get_password_hash, verify_password, generate_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:3000")
RESET_TOKEN_EXPIRY_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRY_MINUTES", 10))
VERIFICATION_EXPIRY_HOURS = 24

GENERIC_RESET_MESSAGE = "If the email exists, a password reset link has been sent"


def display_name(user: dict, role: str) -> str:
    if role == "student":
        name = f"{user.get('first_name', '')} {user.get('last_name', '')}".strip()
        return name or "Student"
    return user.get("name") or role.capitalize()


# ✅ 1. SIGN IN (all roles)
@router.post("/signin", response_model=TokenResponse)
async def signin(credentials: SignInRequest):
    """Exchange email, password and role for a bearer token."""
    db = get_db()

    user = await db[ROLE_COLLECTIONS[credentials.role]].find_one({"email": credentials.email.lower()})
    if not user or not verify_password(credentials.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if credentials.role == "company" and not user.get("is_approved"):
        raise HTTPException(status_code=403, detail="Your account is pending admin approval")

    user_id = str(user["_id"])
    access_token = create_access_token(data={"sub": user_id, "role": credentials.role})
    logger.info(f"{credentials.role} {user_id} signed in")

    return {"access_token": access_token, "token_type": "bearer", "role": credentials.role, "user_id": user_id}


# ✅ 2. COMPANY SIGN UP (pending approval)
@router.post("/signup", status_code=201)
async def company_signup(company: CompanySignUp, notifier: Notifier = Depends(get_notifier)):
    db = get_db()

    email = company.email.lower()
    if await db.companies.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="Company with this email already exists")

    now = datetime.utcnow()
    company_doc = company.model_dump()
    company_doc.update({
        "email": email,
        "password": get_password_hash(company.password),
        "is_approved": False,
        "role": "company",
        "created_at": now,
        "updated_at": now
    })

    try:
        result = await db.companies.insert_one(company_doc)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Company with this email already exists")

    notifier.notify(email, "welcome", {"name": company.name, "role": "company"})

    return {
        "message": "Registration successful. Your account is pending admin approval.",
        "company_id": str(result.inserted_id)
    }


# ✅ 3. STUDENT SIGN UP (email verification)
@router.post("/student-signup", status_code=201)
async def student_signup(student: StudentSignUp, notifier: Notifier = Depends(get_notifier)):
    db = get_db()

    email = student.email.lower()
    college_oid = to_object_id(student.college_id)
    if college_oid is None or not await db.colleges.find_one({"_id": college_oid}):
        raise HTTPException(status_code=400, detail="College not found")

    if await db.students.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="Student with this email already exists")

    if await db.students.find_one({"college_id": college_oid, "roll_number": student.roll_number}):
        raise HTTPException(status_code=400, detail="Roll number already exists for this college")

    now = datetime.utcnow()
    student_doc = student.model_dump()
    student_doc.update({
        "email": email,
        "password": get_password_hash(student.password),
        "college_id": college_oid,
        "is_email_verified": False,
        "role": "student",
        "created_at": now,
        "updated_at": now
    })

    try:
        result = await db.students.insert_one(student_doc)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Student with this email or roll number already exists")

    token = generate_token()
    await db.email_verifications.insert_one({
        "email": email,
        "token": token,
        "created_at": now,
        "expires_at": now + timedelta(hours=VERIFICATION_EXPIRY_HOURS)
    })

    notifier.notify(email, "email_verification", {
        "name": f"{student.first_name} {student.last_name}",
        "verification_url": f"{APP_BASE_URL}/auth/verify-email?token={token}"
    })

    return {
        "message": "Registration successful! Please check your email to verify your account.",
        "student_id": str(result.inserted_id)
    }


# ✅ 4. VERIFY EMAIL
@router.post("/verify-email")
async def verify_email(request: VerifyEmailRequest):
    db = get_db()

    verification = await db.email_verifications.find_one({
        "token": request.token,
        "expires_at": {"$gt": datetime.utcnow()}
    })
    if not verification:
        raise HTTPException(status_code=400, detail="Invalid or expired verification token")

    result = await db.students.update_one(
        {"email": verification["email"]},
        {"$set": {"is_email_verified": True, "updated_at": datetime.utcnow()}}
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Student not found")

    await db.email_verifications.delete_one({"_id": verification["_id"]})

    return {"message": "Email verified successfully! You can now sign in."}


# ✅ 5. FORGOT PASSWORD
@router.post("/forgot-password")
async def forgot_password(request: ForgotPasswordRequest):
    """Email a reset link. The response never reveals whether the account exists."""
    db = get_db()

    email = request.email.lower()
    user = await db[ROLE_COLLECTIONS[request.role]].find_one({"email": email})
    if not user:
        return {"message": GENERIC_RESET_MESSAGE}

    token = generate_token()
    now = datetime.utcnow()

    await db.password_resets.delete_many({"email": email, "role": request.role})
    await db.password_resets.insert_one({
        "email": email,
        "token": token,
        "role": request.role,
        "created_at": now,
        "expires_at": now + timedelta(minutes=RESET_TOKEN_EXPIRY_MINUTES)
    })

    sent = await send_template_email(email, "password_reset", {
        "name": display_name(user, request.role),
        "reset_url": f"{APP_BASE_URL}/auth/reset-password?token={token}",
        "expires_in_minutes": RESET_TOKEN_EXPIRY_MINUTES
    })
    if not sent:
        logger.warning(f"Password reset email for {request.role} {user['_id']} was not delivered")

    return {"message": GENERIC_RESET_MESSAGE}


# ✅ 6. RESET PASSWORD
@router.post("/reset-password")
async def reset_password(request: ResetPasswordRequest):
    db = get_db()

    reset = await db.password_resets.find_one({
        "token": request.token,
        "expires_at": {"$gt": datetime.utcnow()}
    })
    if not reset:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    result = await db[ROLE_COLLECTIONS[reset["role"]]].update_one(
        {"email": reset["email"]},
        {"$set": {
            "password": get_password_hash(request.new_password),
            "updated_at": datetime.utcnow()
        }}
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="User not found")

    await db.password_resets.delete_one({"_id": reset["_id"]})

    return {"message": "Password reset successfully. You can now sign in with your new password."}


# ✅ 7. CHANGE PASSWORD (signed in)
@router.post("/change-password")
async def change_password(request: ChangePasswordRequest, current_user: dict = Depends(get_current_user)):
    db = get_db()
    collection = db[ROLE_COLLECTIONS[current_user["role"]]]

    user = await collection.find_one({"_id": current_user["_id"]})
    if not user or not verify_password(request.current_password, user["password"]):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    await collection.update_one(
        {"_id": current_user["_id"]},
        {"$set": {"password": get_password_hash(request.new_password), "updated_at": datetime.utcnow()}}
    )

    return {"message": "Password changed successfully"}
