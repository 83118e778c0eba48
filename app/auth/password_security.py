from passlib.context import CryptContext

# Argon2 hashes, verified by the identity service on sign-in
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)
