"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
The adapters themselves are built once in the app lifespan and kept
in app.state.
"""

from fastapi import Request

from src.adapters.smtp import ConsoleEmailSender, HttpEmailSender, SmtpEmailSender
from src.config.settings import Settings, get_settings
from src.domain.ports import EmailSender, VerificationRepository
from src.domain.verification import VerificationService


def build_email_sender(settings: Settings) -> EmailSender:
    """Construct the delivery adapter selected by settings.email_backend."""
    if settings.email_backend == "smtp":
        expire_minutes = (settings.code_ttl_seconds or 600) // 60
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_email=settings.smtp_from_email,
            from_name=settings.smtp_from_name,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.delivery_timeout_seconds,
            expire_minutes=expire_minutes,
        )
    if settings.email_backend == "http":
        return HttpEmailSender(
            base_url=settings.delivery_service_url,
            timeout=settings.delivery_timeout_seconds,
        )
    return ConsoleEmailSender()


def get_repository(request: Request) -> VerificationRepository:
    """
    Get verification repository from app state.

    The repository is created during app lifespan startup.
    """
    return request.app.state.repository


def get_email_sender(request: Request) -> EmailSender:
    """Get delivery adapter from app state."""
    return request.app.state.email_sender


def get_verification_service(request: Request) -> VerificationService:
    """
    Create verification service with injected dependencies.

    Wires together the repository, email sender and limits from settings.
    """
    settings = get_settings()
    return VerificationService(
        repository=get_repository(request),
        email_sender=get_email_sender(request),
        max_attempts=settings.max_attempts,
        code_ttl_seconds=settings.code_ttl_seconds,
    )
