from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from cashdrawer.config import settings
from cashdrawer.database import get_db
from cashdrawer.crud import users as crud_users

# bcrypt para los PIN de validación (costo configurable, mínimo 10)
pin_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PIN_HASH_ROUNDS,
)
# El login vive en otro servicio; solo necesitamos el esquema para leer el Bearer
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

def hash_pin(pin: str) -> str:
    """Genera el hash seguro del PIN."""
    return pin_context.hash(pin)

def verify_pin_hash(plain_pin: str, pin_hash: str) -> bool:
    """Verifica si el PIN coincide con el hash guardado."""
    return pin_context.verify(plain_pin, pin_hash)

def dummy_verify() -> None:
    """Gasta lo mismo que una verificación real cuando no hay hash que comparar."""
    pin_context.dummy_verify()

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt

async def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """
    Resuelve el actor autenticado.

    El token solo trae el username: rol y tienda se leen de la BD en cada
    petición, así un cambio de rol aplica sin volver a iniciar sesión.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Credenciales no válidas",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = crud_users.get_user_by_username(db, username)
    if user is None:
        raise credentials_exception

    return user
