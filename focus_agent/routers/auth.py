from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from focus_agent.database import get_db
from focus_agent.models.user import User
from focus_agent.schemas.user import UserCreate, UserLogin, TokenResponse
from focus_agent.auth.token import create_access_token, hash_password, verify_password
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

def _token_response(user: User, message: str) -> TokenResponse:
    access_token = create_access_token(data={"sub": str(user.user_id)})
    return TokenResponse(
        message=message,
        user_id=user.user_id,
        name=user.name,
        access_token=access_token,
    )

@router.post("/signup", response_model=TokenResponse)
async def signup(user: UserCreate, db: Session = Depends(get_db)):
    # Check if user already exists
    db_user = db.query(User).filter(User.email == user.email).first()
    if db_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    db_user = User(
        name=user.name,
        email=user.email,
        password_hash=hash_password(user.password),
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    logger.info(f"Created user {db_user.user_id}")
    return _token_response(db_user, "Signup successful.")

@router.post("/login", response_model=TokenResponse)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == credentials.email).first()

    # Verify user exists and password is correct
    if not db_user or not verify_password(credentials.password, db_user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return _token_response(db_user, "Login successful.")
