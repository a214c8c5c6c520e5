"""
API v1 auth routes.

Defines the identity endpoints:
- POST /v1/auth/register - Create an unverified account and send a code
- POST /v1/auth/login - Exchange credentials for a session token
- POST /v1/auth/verify - Verify the email with a code
- POST /v1/auth/resend-verification - Send an additional code
- GET  /v1/auth/verification-status - Whether an email is verified
- GET  /v1/auth/me - Profile of the authenticated caller

Domain errors propagate to the error boundary in src.api.errors.
"""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_authentication_service,
    get_registration_service,
    require_verified_claims,
)
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    ResendVerificationRequest,
    VerificationStatusResponse,
    VerifyRequest,
)
from src.domain.authentication import AuthenticationService
from src.domain.registration import RegistrationService
from src.domain.tokens import SessionClaims

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Email or username already exists"},
    },
    summary="Register a new user",
    description="Create an unverified account. A 5-digit verification code "
    "will be sent to the provided email.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    service.register(
        request_data.fullname,
        request_data.username,
        request_data.email,
        request_data.password,
    )
    return MessageResponse(
        message="Registration successful. Please check your email for the verification code."
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        403: {"model": ErrorResponse, "description": "Email not verified"},
        404: {"model": ErrorResponse, "description": "Unknown email or password mismatch"},
    },
    summary="Log in",
    description="Exchange email and password for a bearer token valid for 24 hours.",
)
def login(
    request_data: LoginRequest,
    service: AuthenticationService = Depends(get_authentication_service),
) -> LoginResponse:
    token = service.login(request_data.email, request_data.password)
    return LoginResponse(message="Login successful", token=token)


@router.post(
    "/verify",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Unknown email or code"},
        409: {"model": ErrorResponse, "description": "Email already verified"},
        410: {"model": ErrorResponse, "description": "Verification code expired"},
    },
    summary="Verify email",
    description="Submit the verification code received via email.",
)
def verify(
    request_data: VerifyRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    service.verify_email(request_data.email, request_data.code)
    return MessageResponse(message="Email verified successfully")


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Unknown email"},
        409: {"model": ErrorResponse, "description": "Email already verified"},
    },
    summary="Resend verification code",
)
def resend_verification(
    request_data: ResendVerificationRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    service.resend_verification(request_data.email)
    return MessageResponse(message="Verification code sent")


@router.get(
    "/verification-status",
    response_model=VerificationStatusResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Unknown email"},
    },
    summary="Email verification status",
)
def verification_status(
    email: str = Query(""),
    service: RegistrationService = Depends(get_registration_service),
) -> VerificationStatusResponse:
    verified = service.verification_status(email)
    return VerificationStatusResponse(email=email, verified=verified)


@router.get(
    "/me",
    response_model=ProfileResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        403: {"model": ErrorResponse, "description": "Email not verified"},
    },
    summary="Authenticated profile",
)
def me(
    claims: SessionClaims = Depends(require_verified_claims),
    service: AuthenticationService = Depends(get_authentication_service),
) -> ProfileResponse:
    user = service.profile(claims.id)
    return ProfileResponse(
        id=user.id,
        fullname=user.fullname,
        username=user.username,
        email=user.email,
        image=user.image,
    )
