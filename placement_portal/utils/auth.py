from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from datetime import datetime, timedelta

from placement_portal.database import get_db
from placement_portal.models.base import to_object_id
from placement_portal.utils.security import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES

ROLE_COLLECTIONS = {
    "admin": "admins",
    "college": "colleges",
    "company": "companies",
    "student": "students",
}

security = HTTPBearer()


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Resolve the bearer token to the account document of its role."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(credentials.credentials, SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub")
        role: str = payload.get("role")
        if user_id is None or role not in ROLE_COLLECTIONS:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    oid = to_object_id(user_id)
    if oid is None:
        raise credentials_exception

    db = get_db()
    user = await db[ROLE_COLLECTIONS[role]].find_one({"_id": oid}, {"password": 0})
    if user is None:
        raise credentials_exception

    user["role"] = role
    return user


def _role_required(*roles):
    def dependency(current_user: dict = Depends(get_current_user)):
        if current_user["role"] not in roles:
            raise HTTPException(status_code=403, detail="Forbidden")
        return current_user
    return dependency


admin_required = _role_required("admin")
college_required = _role_required("college")
company_required = _role_required("company")
student_required = _role_required("student")
