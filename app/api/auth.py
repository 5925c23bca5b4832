from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select
from app.models.user import User
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.core.context import UserContext
from app.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    get_current_context,
)
from app.database import get_session

router = APIRouter(prefix="/auth", tags=["auth"])

# Registration
@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(user_create: UserCreate, session: Session = Depends(get_session)):
    user_exists = session.exec(select(User).where(User.email == user_create.email)).first()
    if user_exists:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=user_create.email,
        hashed_password=get_password_hash(user_create.password),
        name=user_create.name,
        timezone=user_create.timezone,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user

# Login
@router.post("/login")
def login(form_data: OAuth2PasswordRequestForm = Depends(), session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == form_data.username)).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")

    access_token = create_access_token(data={"sub": str(user.id)})
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=UserRead)
def read_users_me(
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    return session.get(User, context.user_id)

@router.patch("/me", response_model=UserRead)
def update_users_me(
    data: UserUpdate,
    context: UserContext = Depends(get_current_context),
    session: Session = Depends(get_session),
):
    user = session.get(User, context.user_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
