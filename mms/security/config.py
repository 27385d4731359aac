"""Security headers, payload limits and rate limit presets."""

from flask import abort, request


def configure_security_headers(app):
    """Configure security headers."""

    @app.after_request
    def add_security_headers(response):
        # Prevent MIME type sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # Prevent clickjacking
        response.headers['X-Frame-Options'] = 'DENY'

        response.headers['Referrer-Policy'] = 'no-referrer'
        response.headers['Cross-Origin-Resource-Policy'] = 'same-origin'

        # JSON only, nothing to load
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"

        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    return app


def validate_input_length(app):
    """Reject request bodies above MAX_CONTENT_LENGTH before they are parsed."""
    limit = app.config.get('MAX_CONTENT_LENGTH') or 10 * 1024 * 1024

    @app.before_request
    def limit_request_size():
        if request.content_length and request.content_length > limit:
            abort(413)  # Payload Too Large

    return app


def auth_rate_limit():
    """Rate limit for login attempts."""
    return "5 per minute"


__all__ = [
    'configure_security_headers',
    'validate_input_length',
    'auth_rate_limit',
]
