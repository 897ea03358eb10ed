#!/usr/bin/env python3
"""
Grammable Admin Tools
Command-line utilities for administrative tasks

Available commands:
- create-user: Create a new user account
- list-users: List all users in the system
- list-grams: List grams, newest first
- system-stats: Display user, gram and comment counts
"""

import os
import sys
import argparse
import getpass

# Make the project root importable when run as a script
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

try:
    from app import create_app
    from app.services import user_service, gram_service, comment_service
except ImportError as e:
    print(f"❌ Error importing application modules: {e}")
    print("🔧 Make sure you're running this from the Grammable directory")
    sys.exit(1)


def create_user(args, app=None):
    """Create a new user"""
    app = app or create_app()

    with app.app_context():
        username = args.username or input("Enter username: ").strip()
        email = args.email or input("Enter email: ").strip()

        if user_service.get_user_by_username(username):
            print(f"❌ User '{username}' already exists")
            return False
        if user_service.get_user_by_email(email):
            print(f"❌ Email '{email}' is already registered")
            return False

        password = args.password
        if not password:
            password = getpass.getpass("Enter password: ")
            if password != getpass.getpass("Confirm password: "):
                print("❌ Passwords do not match")
                return False

        min_length = app.config.get('PASSWORD_MIN_LENGTH', 6)
        if len(password) < min_length:
            print(f"❌ Password must be at least {min_length} characters long")
            return False

        user = user_service.create_user(username=username, email=email, password=password)
        print(f"✅ Created user {user.username} ({user.id})")
        return True


def list_users(args, app=None):
    """List all users in the system"""
    app = app or create_app()

    with app.app_context():
        users = user_service.list_users(limit=args.limit)

        if not users:
            print("📭 No users found in the database")
            return True

        print(f"👥 Found {len(users)} user(s):")
        print("-" * 70)
        print(f"{'Username':<20} {'Email':<30} {'Created'}")
        print("-" * 70)
        for user in users:
            created_date = user.created_at.strftime('%Y-%m-%d') if user.created_at else "Unknown"
            print(f"{user.username:<20} {user.email:<30} {created_date}")
        return True


def list_grams(args, app=None):
    """List grams, newest first"""
    app = app or create_app()

    with app.app_context():
        grams = gram_service.list_grams()[:args.limit]

        if not grams:
            print("📭 No grams found in the database")
            return True

        print(f"📸 Showing {len(grams)} gram(s):")
        print("-" * 70)
        for gram in grams:
            owner = gram.user.username if gram.user else "unknown"
            message = gram.message if len(gram.message) <= 40 else gram.message[:37] + "..."
            print(f"{gram.id}  {owner:<20} {message}  ({gram.comment_count} comments)")
        return True


def system_stats(args, app=None):
    """Display system statistics"""
    app = app or create_app()

    with app.app_context():
        print("📊 Grammable System Statistics")
        print("=" * 40)
        print(f"👥 Users: {len(user_service.list_users(limit=100000))}")
        print(f"📸 Grams: {gram_service.count_grams()}")
        print(f"💬 Comments: {comment_service.count_comments()}")
        return True


def build_parser():
    parser = argparse.ArgumentParser(
        description="Grammable Admin Tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 scripts/admin_tools.py create-user --username alice --email alice@example.com
  python3 scripts/admin_tools.py list-users
  python3 scripts/admin_tools.py list-grams --limit 20
  python3 scripts/admin_tools.py system-stats
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    create_parser = subparsers.add_parser('create-user', help='Create a new user')
    create_parser.add_argument('--username', help='Username')
    create_parser.add_argument('--email', help='Email address')
    create_parser.add_argument('--password', help='Password (if not provided, will prompt securely)')

    list_parser = subparsers.add_parser('list-users', help='List all users')
    list_parser.add_argument('--limit', type=int, default=100, help='Maximum users to show')

    grams_parser = subparsers.add_parser('list-grams', help='List grams, newest first')
    grams_parser.add_argument('--limit', type=int, default=50, help='Maximum grams to show')

    subparsers.add_parser('system-stats', help='Display system statistics')
    return parser


COMMANDS = {
    'create-user': create_user,
    'list-users': list_users,
    'list-grams': list_grams,
    'system-stats': system_stats,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    success = COMMANDS[args.command](args)
    return 0 if success else 1


if __name__ == '__main__':
    sys.exit(main())
