import logging

from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.services.password_hasher import hash_password
from auth_service.app.services.single_use_codes import EmailVerificationCodeService
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.entities import (
    AuditEvent,
    AuthProvider,
    User,
    UserRole,
    UserStatus,
)
from auth_service.libs.result import Error, Result, Return
from .confirm_password_reset_use_case import validate_password
from .register_dto import RegisterCommand, RegisterResponse, UserInfo

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand (validated business intent)
    - Output: Result[RegisterResponse] (structured response)

    Business Logic:
    1. Check if email already exists (case-insensitive)
    2. Hash password with bcrypt cost factor 12
    3. Create User with status=pending_verification, role=user, provider=local
    4. Issue a 6-digit verification code (15 minutes)
    5. Create AuditEvent with action=register
    6. Commit transaction atomically
    7. Email the code to the user
    """

    def __init__(
        self,
        uow: UnitOfWork,
        verification_codes: EmailVerificationCodeService,
        email_sender: IEmailSender,
    ):
        self.uow = uow
        self.verification_codes = verification_codes
        self.email_sender = email_sender

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with validated email, password and names

        Returns:
            Result[RegisterResponse] with user data
            or Error(EMAIL_ALREADY_EXISTS) if email exists
            or Error(INVALID_PASSWORD) if the password is too long for bcrypt
        """
        password_check = validate_password(command.password)
        if password_check.is_err():
            return password_check

        email = command.email.strip().lower()

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                )

            user = User(
                email=email,
                password_hash=hash_password(command.password),
                first_name=command.first_name.strip(),
                last_name=command.last_name.strip(),
                role=UserRole.user,
                status=UserStatus.pending_verification,
                auth_provider=AuthProvider.local,
                is_verified=False,
            )
            user = await self.uow.users.create(user)

            code = await self.verification_codes.generate(user.id)

            # Create AuditEvent for register action
            audit_event = AuditEvent(
                user_id=user.id,
                action="register",
                event_metadata={"email": email},
            )
            await self.uow.audit_events.create(audit_event)

            # Commit transaction atomically
            await self.uow.commit()

        await self.email_sender.send_verification_code(user.email, user.full_name, code)
        logger.info("Registered user %s", user.id)

        return Return.ok(
            RegisterResponse(
                user=UserInfo.from_user(user),
                message="Registration successful. Check your email for the verification code.",
            )
        )
