#!/usr/bin/env python3
"""Development server runner for TechFest."""

import os
from pathlib import Path

from dotenv import load_dotenv


def setup_environment():
    """Load .env and default the Flask development settings."""
    env_file = Path(__file__).parent / '.env'
    if env_file.exists():
        load_dotenv(env_file)
        print(f"✓ Loaded environment from {env_file}")
    else:
        print(f"⚠️ No .env file found at {env_file}")

    os.environ.setdefault('FLASK_DEBUG', '1')
    # Local HTTP has no TLS, so secure cookies would never be sent back
    os.environ.setdefault('SESSION_COOKIE_SECURE', 'false')


def run_development_server():
    from techfest import create_app

    app = create_app()

    print("\n" + "=" * 60)
    print("🚀 Starting TechFest Development Server")
    print("=" * 60)
    print(f"Database: {app.config['SQLALCHEMY_DATABASE_URI']}")
    print("\n📱 API available at http://localhost:5000")
    print("\n🛠️ To create demo data, run in another terminal:")
    print("   flask --app techfest seed demo")
    print("\n⏹️ Press Ctrl+C to stop the server")
    print("=" * 60)

    app.run(host='0.0.0.0', port=5000, debug=True, use_reloader=True)


def main():
    print("TechFest Event Portal - Development Setup")
    print("=" * 60)
    setup_environment()
    try:
        run_development_server()
    except KeyboardInterrupt:
        print("\n\n🛑 Development server stopped by user")


if __name__ == "__main__":
    main()
