"""
Configuration Validation Module

Validates critical configuration values at startup to fail-fast
with clear error messages instead of runtime failures.
"""

import sys
from typing import Optional

from enums.runtime_environment import RuntimeEnvironment


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_app_secret(secret: Optional[str]) -> None:
    """
    Validate the session signing secret.

    Args:
        secret: APP_SECRET value

    Raises:
        ConfigValidationError: If secret is missing or too weak
    """
    if not secret or len(secret.strip()) == 0:
        raise ConfigValidationError(
            "APP_SECRET is required for signing session cookies!\n"
            "Generate a secure secret with: openssl rand -hex 32\n"
            "Add to .env: APP_SECRET=<your-generated-secret>"
        )

    if len(secret) < 32:
        raise ConfigValidationError(
            f"APP_SECRET is too weak (length: {len(secret)}, minimum: 32)!\n"
            "Generate a secure secret with: openssl rand -hex 32\n"
            "A short secret allows forging session cookies."
        )


def validate_stripe_key(api_key: Optional[str]) -> None:
    """
    Validate the payment gateway secret key.

    Args:
        api_key: STRIPE_API_KEY value

    Raises:
        ConfigValidationError: If the key is missing or is not a secret key
    """
    if not api_key or len(api_key.strip()) == 0:
        raise ConfigValidationError(
            "STRIPE_API_KEY is required and must not be empty!\n"
            "Get your secret key from the payment provider dashboard.\n"
            "Add to .env: STRIPE_API_KEY=sk_live_..."
        )

    if not api_key.startswith(("sk_", "rk_")):
        raise ConfigValidationError(
            "STRIPE_API_KEY must be a secret or restricted key (sk_... or rk_...).\n"
            "Publishable keys (pk_...) cannot create charges."
        )


def validate_required_config(value: Optional[str], name: str, example: str = "") -> None:
    """
    Validate that a required config value is set.

    Raises:
        ConfigValidationError: If value is missing
    """
    if not value:
        error_msg = f"{name} is required but not set!"
        if example:
            error_msg += f"\nAdd to .env: {name}={example}"
        raise ConfigValidationError(error_msg)


def validate_startup_config(config_module) -> None:
    """
    Validate all critical configuration at startup.

    The payment key and the mail server are only enforced in PROD so that
    local development works without external accounts.

    Raises:
        ConfigValidationError: If any validation fails
    """
    validate_app_secret(getattr(config_module, 'APP_SECRET', None))

    if getattr(config_module, 'RUNTIME_ENVIRONMENT', None) == RuntimeEnvironment.PROD:
        validate_stripe_key(getattr(config_module, 'STRIPE_API_KEY', None))
        validate_required_config(getattr(config_module, 'MAIL_HOST', None), 'MAIL_HOST', 'smtp.example.com')
        validate_required_config(getattr(config_module, 'FRONTEND_URL', None), 'FRONTEND_URL', 'https://shop.example.com')


def validate_or_exit(config_module) -> None:
    """
    Validate configuration and exit with error code 1 if validation fails.

    This is the main entry point for startup validation.
    """
    try:
        validate_startup_config(config_module)
    except ConfigValidationError as e:
        print(f"\n ERROR: Configuration Validation Failed\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nAPI startup aborted. Please fix configuration and try again.\n", file=sys.stderr)
        sys.exit(1)
