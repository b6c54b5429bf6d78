# app/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
import logging

from app.accounts import AccountError, AccountService, InvalidCredentials
from app.dependencies import get_account_service
from app.models import CreateAccount, Login, SetPassword, TokenInfo, User

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/create-account", status_code=status.HTTP_201_CREATED)
async def create_account(data: CreateAccount, service: AccountService = Depends(get_account_service)):
    """Starts registration by emailing a verification link."""
    try:
        await service.create_account(data.username, data.email)
    except AccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"message": "Verification email sent. Check your inbox to set your password."}


@router.get("/verify-email", response_model=TokenInfo)
async def verify_email(token: str = Query(min_length=1), service: AccountService = Depends(get_account_service)):
    try:
        return await service.verify_token(token)
    except AccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/set-password", response_model=User)
async def set_password(data: SetPassword, service: AccountService = Depends(get_account_service)):
    """Completes registration: the token holder chooses a password."""
    try:
        return await service.set_password(data.token, data.password)
    except AccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/login", response_model=User)
async def login(data: Login, service: AccountService = Depends(get_account_service)):
    logger.info(f"Login attempt for: {data.email}")
    try:
        return await service.login(data.email, data.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
