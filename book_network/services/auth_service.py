from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from book_network.models.user import User
from book_network.repositories.user_repo import UserRepo

class AuthService:
    @staticmethod
    def register(username: str, email: str, password: str):
        if UserRepo.get_by_username(username) or UserRepo.get_by_email(email):
            raise ValueError("Username or email already registered")

        user = User(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
        )
        UserRepo.create(user)
        current_app.logger.info(f"[auth] registered user={user.id}")
        return user

    @staticmethod
    def login(username: str, password: str):
        user = UserRepo.get_by_username(username)
        if not user or not check_password_hash(user.password_hash, password):
            current_app.logger.warning(f"[auth] failed login username={username}")
            raise ValueError("Invalid username or password")

        # the token subject is the principal id the lending engine compares on
        token = create_access_token(
            identity=user.principal_id,
            additional_claims={"username": user.username}
        )
        return token, user
