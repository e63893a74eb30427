"""Authentication service"""
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.config import settings
from pocket_trader.core.exceptions import AuthenticationException
from pocket_trader.models.database import User
from pocket_trader.models.schemas import UserCreate, TokenData


# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService:
    """Authentication service"""
    
    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)
    
    @staticmethod
    def get_password_hash(password: str) -> str:
        return pwd_context.hash(password)
    
    @staticmethod
    def _encode(data: dict, token_type: str, expire: datetime) -> str:
        to_encode = data.copy()
        to_encode.update({"exp": expire, "type": token_type})
        return jwt.encode(
            to_encode,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
    
    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create an access token
        
        Args:
            data: claims to embed
            expires_delta: lifetime (default: settings.access_token_expire_minutes)
            
        Returns:
            JWT token
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
        return AuthService._encode(data, "access", datetime.utcnow() + expires_delta)
    
    @staticmethod
    def create_refresh_token(data: dict) -> str:
        """Create a refresh token"""
        expire = datetime.utcnow() + timedelta(days=settings.refresh_token_expire_days)
        return AuthService._encode(data, "refresh", expire)
    
    @staticmethod
    async def verify_token(token: str, token_type: str = "access") -> TokenData:
        """
        Verify a token
        
        Args:
            token: JWT token
            token_type: access or refresh
            
        Returns:
            Token payload
            
        Raises:
            AuthenticationException: token is invalid
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
            )
        except JWTError as e:
            raise AuthenticationException(f"Token validation failed: {str(e)}")
        
        if payload.get("type") != token_type:
            raise AuthenticationException("Invalid token type")
        
        user_id = payload.get("sub")
        if user_id is None:
            raise AuthenticationException("Invalid token")
        
        return TokenData(user_id=UUID(user_id), email=payload.get("email"))
    
    @staticmethod
    def issue_tokens(user: User) -> dict:
        """Access and refresh tokens for a user"""
        token_data = {
            "sub": str(user.id),
            "email": user.email,
        }
        return {
            "access_token": AuthService.create_access_token(token_data),
            "refresh_token": AuthService.create_refresh_token(token_data),
        }
    
    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
    
    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()
    
    @staticmethod
    async def create_user(db: AsyncSession, user_data: UserCreate) -> User:
        """
        Create a user
        
        Args:
            db: database session
            user_data: registration payload
            
        Returns:
            Created user
            
        Raises:
            AuthenticationException: email already registered
        """
        existing_user = await AuthService.get_user_by_email(db, user_data.email)
        if existing_user:
            raise AuthenticationException("Email already registered")
        
        user = User(
            email=user_data.email,
            hashed_password=AuthService.get_password_hash(user_data.password),
        )
        
        db.add(user)
        await db.commit()
        await db.refresh(user)
        
        return user
    
    @staticmethod
    async def authenticate_user(
        db: AsyncSession,
        email: str,
        password: str,
    ) -> Optional[User]:
        """
        Authenticate a user
        
        Returns:
            The user, or None when the credentials are wrong or the account is inactive
        """
        user = await AuthService.get_user_by_email(db, email)
        
        if not user:
            return None
        
        if not AuthService.verify_password(password, user.hashed_password):
            return None
        
        if not user.is_active:
            return None
        
        return user
