from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from auth_service.api.error import raise_for_error
from auth_service.api.utils.admin_auth import verify_admin_api_key
from auth_service.api.utils.rate_limit import rate_limit, resolve_client_identifier
from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.services.lockout_policy import LockoutPolicy
from auth_service.app.services.rate_limiter import RateLimiter
from auth_service.app.services.refresh_token_store import RefreshTokenStore
from auth_service.app.services.single_use_codes import (
    EmailVerificationCodeService,
    PasswordResetTokenService,
)
from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.use_cases.auth import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    ConfirmPasswordResetResponse,
    ConfirmPasswordResetUseCase,
    ExternalLoginCommand,
    ExternalLoginUseCase,
    LoginResponse,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    ResendVerificationResponse,
    ResendVerificationUseCase,
    ValidateResetTokenResponse,
    ValidateResetTokenUseCase,
    VerifyEmailResponse,
    VerifyEmailUseCase,
)
from auth_service.depends import (
    get_current_user,
    get_email_sender,
    get_lockout_policy,
    get_password_reset_token_service,
    get_rate_limiter,
    get_refresh_token_store,
    get_token_issuer,
    get_unit_of_work,
    get_verification_code_service,
)
from auth_service.domain.entities import AuthProvider

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ..., min_length=8, max_length=72, description="User password (8-72 chars)"
    )
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    dependencies=[Depends(rate_limit("register"))],
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    verification_codes: EmailVerificationCodeService = Depends(get_verification_code_service),
    email_sender: IEmailSender = Depends(get_email_sender),
):
    """
    User Registration

    Creates a pending account and emails a 6-digit verification code.
    No tokens are issued until the email is verified.

    Raises:
        - 409 Conflict: Email already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
        - 429 Too Many Requests: Rate limit exceeded
    """
    # Map HTTP request to Command (validated business intent)
    command = RegisterCommand(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )

    use_case = RegisterUseCase(uow, verification_codes, email_sender)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., max_length=256, description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
    lockout_policy: LockoutPolicy = Depends(get_lockout_policy),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
):
    """
    User Login

    Authenticates user and returns an access token and a refresh token.

    Raises:
        - 401 Unauthorized: Invalid credentials or locked account
        - 403 Forbidden: Email not verified or user disabled
        - 429 Too Many Requests: Rate limit exceeded
    """
    use_case = LoginUseCase(
        uow,
        token_issuer,
        refresh_tokens,
        lockout_policy,
        rate_limiter,
        rate_limit=http_request.app.state.rate_limits["login"],
        store_timeout_seconds=http_request.app.state.config.STORE_TIMEOUT_SECONDS,
    )
    result = await use_case.execute(
        request.email, request.password, resolve_client_identifier(http_request)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class RefreshRequest(BaseModel):
    """Refresh token HTTP request payload"""

    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
):
    """
    Refresh JWT Token

    Exchanges a refresh token for a new token pair (rotation).
    The presented refresh token cannot be used again.

    Raises:
        - 401 Unauthorized: Unknown, revoked, expired or already used token
    """
    use_case = RefreshTokenUseCase(uow, token_issuer, refresh_tokens)
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
):
    """
    Logout

    Revokes every refresh token of the current user.

    Raises:
        - 401 Unauthorized: Missing or invalid access token
    """
    use_case = LogoutUseCase(uow, refresh_tokens)
    result = await use_case.execute(UUID(current_user["user_id"]))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class VerifyEmailRequest(BaseModel):
    """Verify email HTTP request payload"""

    email: EmailStr = Field(..., description="Email address the code was sent to")
    code: str = Field(..., pattern=r"^\d{6}$", description="6-digit verification code")


@router.post(
    "/verify-email",
    status_code=status.HTTP_200_OK,
    response_model=VerifyEmailResponse,
    dependencies=[Depends(rate_limit("verify-email"))],
)
async def verify_email(
    request: VerifyEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    verification_codes: EmailVerificationCodeService = Depends(get_verification_code_service),
    email_sender: IEmailSender = Depends(get_email_sender),
):
    """
    Email Verification

    Confirms the 6-digit code and activates the account.

    Raises:
        - 400 Bad Request: INVALID_CODE or ATTEMPTS_EXCEEDED
        - 429 Too Many Requests: Rate limit exceeded
    """
    use_case = VerifyEmailUseCase(uow, verification_codes, email_sender)
    result = await use_case.execute(request.email, request.code)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class EmailRequest(BaseModel):
    """Payload carrying only an email address"""

    email: EmailStr = Field(..., description="User email address")


@router.post(
    "/resend-verification",
    status_code=status.HTTP_200_OK,
    response_model=ResendVerificationResponse,
    dependencies=[Depends(rate_limit("resend-verification"))],
)
async def resend_verification(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    verification_codes: EmailVerificationCodeService = Depends(get_verification_code_service),
    email_sender: IEmailSender = Depends(get_email_sender),
):
    """
    Resend Verification Code

    Issues a new code; any earlier code stops working.
    Same response whether or not the email is registered.
    """
    use_case = ResendVerificationUseCase(uow, verification_codes, email_sender)
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
    dependencies=[Depends(rate_limit("forgot-password"))],
)
async def forgot_password(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    reset_tokens: PasswordResetTokenService = Depends(get_password_reset_token_service),
    email_sender: IEmailSender = Depends(get_email_sender),
):
    """
    Request Password Reset

    Emails a reset token valid for 4 hours.
    Same response whether or not the email is registered.
    """
    use_case = RequestPasswordResetUseCase(uow, reset_tokens, email_sender)
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetTokenRequest(BaseModel):
    """Payload carrying a password reset token"""

    token: str = Field(..., min_length=1, description="Password reset token")


@router.post(
    "/validate-reset-token",
    status_code=status.HTTP_200_OK,
    response_model=ValidateResetTokenResponse,
)
async def validate_reset_token(
    request: ResetTokenRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    reset_tokens: PasswordResetTokenService = Depends(get_password_reset_token_service),
):
    """
    Validate Password Reset Token

    Reports whether the token can still be used, without consuming it.
    """
    use_case = ValidateResetTokenUseCase(uow, reset_tokens)
    result = await use_case.execute(request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    """Confirm password reset HTTP request payload"""

    token: str = Field(..., min_length=1, description="Password reset token")
    new_password: str = Field(..., description="New password (8-72 chars)")


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmPasswordResetResponse,
    dependencies=[Depends(rate_limit("reset-password"))],
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    reset_tokens: PasswordResetTokenService = Depends(get_password_reset_token_service),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
):
    """
    Confirm Password Reset

    Sets the new password, consumes the token and ends every session.

    Raises:
        - 400 Bad Request: INVALID_TOKEN or INVALID_PASSWORD
    """
    use_case = ConfirmPasswordResetUseCase(uow, reset_tokens, refresh_tokens)
    result = await use_case.execute(request.token, request.new_password)

    if result.is_err():
        # A bad reset token is a form error, not an authentication failure
        raise_for_error(result.error, {"INVALID_TOKEN": status.HTTP_400_BAD_REQUEST})

    return result.value


class ChangePasswordRequest(BaseModel):
    """Change password HTTP request payload"""

    current_password: str = Field(..., max_length=256)
    new_password: str = Field(..., description="New password (8-72 chars)")


@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ChangePasswordResponse,
)
async def change_password(
    request: ChangePasswordRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
):
    """
    Change Password

    Requires the current password. Ends every session on success.

    Raises:
        - 400 Bad Request: INVALID_PASSWORD
        - 401 Unauthorized: Missing or invalid access token
        - 404 Not Found: USER_NOT_FOUND
    """
    use_case = ChangePasswordUseCase(uow, refresh_tokens)
    result = await use_case.execute(
        UUID(current_user["user_id"]), request.current_password, request.new_password
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ExternalLoginRequest(BaseModel):
    """Identity handed over by the OAuth2 callback handler"""

    email: EmailStr
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    provider: AuthProvider = AuthProvider.google


@router.post(
    "/external-login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def external_login(
    request: ExternalLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    refresh_tokens: RefreshTokenStore = Depends(get_refresh_token_store),
):
    """
    External Identity Login

    Called by the OAuth2 bridge once the provider has verified the user.
    Creates or links the account and returns a token pair.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 403 Forbidden: USER_DISABLED
    """
    command = ExternalLoginCommand(
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        provider=request.provider,
    )
    use_case = ExternalLoginUseCase(uow, token_issuer, refresh_tokens)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
