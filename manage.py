#!/usr/bin/env python3
"""
Management commands for the navigation admin.

Usage:
    python manage.py init_db
    python manage.py check_db
    python manage.py reset_db
    python manage.py create_admin <username> <password>
    python manage.py create_menu <name> <location>
"""

import sys
from sqlalchemy import inspect
from sqlmodel import SQLModel, Session
from database import engine
from settings import logger
from models.auth import User, UserRole
# Import all models to ensure tables are created
from models.auth import Token, TokenUser
from models.menu import Menu, MenuItem
from models.activity import ActivityLog
from apis.auth import hash_password
from navigation.errors import NavigationError
from navigation.menus import MenuService


def init_db():
    """Initialize database tables."""
    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created successfully")


def check_db(bind=engine):
    """Check database connection and tables."""
    try:
        tables = inspect(bind).get_table_names()
        logger.info(f"Database connected. Found {len(tables)} tables: {tables}")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        sys.exit(1)
    return tables


def reset_db():
    """Drop and recreate all database tables."""
    logger.warning("Dropping all database tables...")
    SQLModel.metadata.drop_all(engine)
    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Database reset successfully")


def create_admin(username: str, password: str):
    """Create an admin user."""
    try:
        with Session(engine) as session:
            admin_user = User(
                username=username,
                hashed_password=hash_password(password),
                role=UserRole.ADMIN,
                is_active=True
            )

            session.add(admin_user)
            session.commit()
            session.refresh(admin_user)

            logger.info(f"Admin user '{username}' created successfully with ID: {admin_user.id}")
    except Exception as e:
        logger.error(f"Failed to create admin user: {e}")
        sys.exit(1)


def create_menu(name: str, location: str):
    """Create an empty navigation menu."""
    with Session(engine) as session:
        try:
            menu = MenuService(session).create_menu(name, location)
        except NavigationError as e:
            logger.error(f"Failed to create menu: {e.message}")
            sys.exit(1)
        logger.info(f"Menu '{menu.name}' created at {menu.location} with ID: {menu.id}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python manage.py <command> [args]")
        print("Commands:")
        print("  init_db                        - Initialize database tables")
        print("  check_db                       - Check database connection")
        print("  reset_db                       - Drop and recreate all tables")
        print("  create_admin <username> <pass> - Create admin user")
        print("  create_menu <name> <location>  - Create a navigation menu")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init_db":
        init_db()
    elif command == "check_db":
        check_db()
    elif command == "reset_db":
        reset_db()
    elif command == "create_admin":
        if len(sys.argv) != 4:
            print("Usage: python manage.py create_admin <username> <password>")
            sys.exit(1)
        create_admin(sys.argv[2], sys.argv[3])
    elif command == "create_menu":
        if len(sys.argv) != 4:
            print("Usage: python manage.py create_menu <name> <location>")
            sys.exit(1)
        create_menu(sys.argv[2], sys.argv[3])
    else:
        print(f"Unknown command: {command}")
        print("Run 'python manage.py' to see available commands")
        sys.exit(1)


if __name__ == "__main__":
    main()
