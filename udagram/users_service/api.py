"""FastAPI application for the users service."""

import logging
from contextlib import asynccontextmanager

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from udagram import CredentialManager, TokenIssuer, require_auth
from udagram.api import configure_logging
from udagram.errors import AuthError, InvalidInput, ServiceError, UserExists
from udagram.models import HealthResponse, MessageResponse

from .config import Settings, settings as default_settings
from .models import (
    CredentialsRequest,
    LoginResponse,
    RegisterResponse,
    User,
    VerificationResponse,
)
from .store import InMemoryUserStore, PostgresUserStore, UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v0/users/auth", tags=["auth"])


def _is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _validate_credentials(payload: CredentialsRequest) -> tuple[str, str]:
    """Return (email, password) or raise the 400 the auth routes share."""
    if not payload.email or not _is_valid_email(payload.email):
        raise InvalidInput("Email is required or malformed", auth=False)

    if not payload.password:
        raise InvalidInput("Password is required", auth=False)

    return payload.email, payload.password


def get_store(request: Request) -> UserStore:
    return request.app.state.store


def get_credentials(request: Request) -> CredentialManager:
    return request.app.state.credentials


def get_tokens(request: Request) -> TokenIssuer:
    return request.app.state.tokens


# ============================================
# AUTH ROUTES
# ============================================

@router.get("/verification", response_model=VerificationResponse, responses={401: {"model": MessageResponse}, 500: {"model": MessageResponse}})
async def verification(identity: dict = Depends(require_auth)):
    """Confirm that the request carries a valid bearer token."""
    return VerificationResponse()


@router.post("/login", response_model=LoginResponse, responses={400: {"model": MessageResponse}, 401: {"model": MessageResponse}})
async def login(
    payload: CredentialsRequest,
    store: UserStore = Depends(get_store),
    credentials: CredentialManager = Depends(get_credentials),
    tokens: TokenIssuer = Depends(get_tokens),
):
    """Check email and password and hand out a bearer token."""
    email, password = _validate_credentials(payload)

    user = await store.get(email)
    if not user:
        logger.info("Login for unknown user")
        raise AuthError("Unauthorized", auth=False)

    auth_valid = await credentials.verify_async(password, user.password_hash)
    if not auth_valid:
        logger.info("Login with wrong password")
        raise AuthError("Unauthorized", auth=False)

    short = user.short()
    return LoginResponse(token=tokens.issue(short.model_dump()), user=short)


@router.post(
    "/",
    response_model=RegisterResponse,
    status_code=201,
    responses={400: {"model": MessageResponse}, 422: {"model": MessageResponse}},
)
async def register(
    payload: CredentialsRequest,
    store: UserStore = Depends(get_store),
    credentials: CredentialManager = Depends(get_credentials),
    tokens: TokenIssuer = Depends(get_tokens),
):
    """Register a new user; is /api/v0/users/auth/."""
    email, password = _validate_credentials(payload)

    # add_if_absent below settles concurrent registrations for the same email.
    if await store.get(email):
        raise UserExists("User may already exist", auth=False)

    password_hash = await credentials.hash_async(password)
    new_user = User(email=email, password_hash=password_hash)

    if not await store.add_if_absent(new_user):
        raise UserExists("User may already exist", auth=False)

    logger.info("Registered new user")
    short = new_user.short()
    return RegisterResponse(token=tokens.issue(short.model_dump()), user=short)


@router.get("/", response_class=PlainTextResponse)
async def auth_index():
    return "hello Auth route"


# ============================================
# APP FACTORY
# ============================================

def create_users_app(
    service_settings: Settings | None = None,
    store: UserStore | None = None,
) -> FastAPI:
    """
    Create the users API.

    Args:
        service_settings: Settings to build the app from (module settings by default)
        store: Explicit user store. When omitted the store is opened on startup:
            PostgreSQL if database_url is set, in-memory otherwise.
    """
    service_settings = service_settings or default_settings
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = app.state.store is None
        if owns_store:
            if service_settings.database_url:
                app.state.store = await PostgresUserStore.connect(service_settings.database_url)
            else:
                logger.info("No database_url configured, using in-memory user store")
                app.state.store = InMemoryUserStore()

        logger.info("Users service started")
        yield

        if owns_store:
            await app.state.store.close()
            app.state.store = None
        logger.info("Users service stopped")

    app = FastAPI(
        title="Udagram Users API",
        description="User registration, login and bearer token verification",
        version=service_settings.service_version,
        lifespan=lifespan,
    )

    app.state.store = store
    app.state.credentials = CredentialManager(rounds=service_settings.bcrypt_rounds)
    app.state.tokens = TokenIssuer(service_settings.jwt_secret, service_settings.jwt_algorithm)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"auth": False, "message": "Malformed request body"},
        )

    @app.get("/", response_model=HealthResponse)
    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse(status="healthy", version=service_settings.service_version)

    app.include_router(router)

    return app
