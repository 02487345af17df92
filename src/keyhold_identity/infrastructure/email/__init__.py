from keyhold_identity.infrastructure.email.smtp_mailer import SmtpMailer, build_mailer

__all__ = ["SmtpMailer", "build_mailer"]
