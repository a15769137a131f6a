"""Outgoing e-mail: password reset links and support requests"""
import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string

logger = logging.getLogger('primegestor.core')


def _send(subject, to, text_body, html_body, reply_to=None):
    from_email = settings.DEFAULT_FROM_EMAIL
    with get_connection() as conn:
        msg = EmailMultiAlternatives(subject, text_body, from_email, to, connection=conn, reply_to=reply_to)
        msg.attach_alternative(html_body, 'text/html')
        msg.send(fail_silently=False)


def send_password_reset_email(user, token):
    """Send the reset link to the user; raises when the mail backend fails"""
    reset_url = f"{settings.APP_URL.rstrip('/')}/reset-password?token={token}"
    ctx = {
        'full_name': user.full_name or user.email,
        'reset_url': reset_url,
        'expiry_hours': settings.PASSWORD_RESET_TIMEOUT_HOURS,
    }
    _send(
        'Solicitação de redefinição de senha - PrimeGestor',
        [user.email],
        render_to_string('emails/password_reset.txt', ctx),
        render_to_string('emails/password_reset.html', ctx),
    )
    logger.info(f"Password reset e-mail sent to {user.email}")


def send_support_email(name, email, subject, message):
    """Forward a support request to the configured support mailbox"""
    support_email = settings.SUPPORT_EMAIL
    if not support_email:
        raise ValueError('SUPPORT_EMAIL is not configured')
    ctx = {'name': name, 'email': email, 'subject': subject, 'message': message}
    _send(
        f"Support Request: {subject}",
        [support_email],
        render_to_string('emails/support_request.txt', ctx),
        render_to_string('emails/support_request.html', ctx),
        reply_to=[email],
    )
    logger.info(f"Support request from {email} forwarded to {support_email}")
