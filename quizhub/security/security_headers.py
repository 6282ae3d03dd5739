"""
Security headers module.

Adds security headers to every response. The service only returns JSON, so
the content security policy forbids everything a browser could load from it.
"""

from flask import current_app


class SecurityHeaders:
    """
    Security headers middleware.

    Adds various security headers to HTTP responses to protect against
    common web vulnerabilities.
    """

    @staticmethod
    def init_app(app):
        """
        Initialize security headers for the Flask app.

        Args:
            app: Flask application instance
        """
        @app.after_request
        def add_security_headers(response):
            """Add security headers to all responses."""
            response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"

            # X-Content-Type-Options: Prevent MIME type sniffing
            response.headers['X-Content-Type-Options'] = 'nosniff'

            # X-Frame-Options: Prevent clickjacking
            response.headers['X-Frame-Options'] = 'DENY'

            # Referrer-Policy: Control referrer information
            response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

            # API responses carry per-user data
            if response.mimetype == 'application/json':
                response.cache_control.no_store = True

            # Strict-Transport-Security: Force HTTPS (only in production)
            if current_app.config.get('SESSION_COOKIE_SECURE', False):
                response.headers['Strict-Transport-Security'] = (
                    'max-age=31536000; includeSubDomains'
                )

            if 'Server' in response.headers:
                del response.headers['Server']

            return response
