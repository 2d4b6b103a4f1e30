"""Users API — registration, login and the caller's own content.

Learn: Routes for account lifecycle and "my stuff":
- POST /users/register → create an account (201, never returns the hash)
- POST /users/login → username/password → bearer token
- GET /users/me → the user the token belongs to
- GET /users/me/reviews → reviews written by the caller
- GET /users/me/comments → comments written by the caller
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reviewstore.auth.dependencies import get_current_user
from reviewstore.auth.jwt import TokenSigner, get_token_signer
from reviewstore.db.engine import get_db
from reviewstore.db.models import User
from reviewstore.schemas.review import CommentRead, ReviewRead
from reviewstore.schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserRead
from reviewstore.services.comment_service import CommentService
from reviewstore.services.review_service import ReviewService
from reviewstore.services.user_service import UserService

router = APIRouter(prefix="/users")


def _get_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


# ─── Register / login ────────────────────────────────────


@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: RegisterRequest, svc: UserService = Depends(_get_service)):
    """Create a new user account."""
    return await svc.register(body.username, body.password)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    svc: UserService = Depends(_get_service),
    signer: TokenSigner = Depends(get_token_signer),
):
    """Login with username and password → bearer token."""
    user = await svc.authenticate(body.username, body.password)
    return TokenResponse(token=signer.issue(user.id))


# ─── Current user ────────────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.get("/me/reviews", response_model=list[ReviewRead])
async def list_my_reviews(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewService(db).list_user_reviews(user.id)


@router.get("/me/comments", response_model=list[CommentRead])
async def list_my_comments(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CommentService(db).list_user_comments(user.id)
