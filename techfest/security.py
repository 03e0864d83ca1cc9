"""Security headers applied to every response."""

from flask import request


def configure_security_headers(app):
    """Configure security headers."""

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'

        csp_directives = [
            "default-src 'self'",
            "img-src 'self' data: https:",
            "connect-src 'self'",
            "frame-ancestors 'none'",
            "base-uri 'self'",
        ]
        response.headers['Content-Security-Policy'] = "; ".join(csp_directives)

        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    return app
